"""
Test configuration and shared fixtures for NexuPay tests.

This file contains:
- Centralized test configuration
- Shared fixtures used across multiple test files
- Common test utilities
"""

import pytest
from unittest.mock import Mock
from nexupay import create_app
from nexupay.models import db, Payment, Debt, EmailTemplate


# Centralized test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
    'SUPABASE_URL': 'https://project.example.supabase.co',
    'SUPABASE_SERVICE_ROLE_KEY': 'test-service-role-key',
    'MIGRATION_STATEMENT_DELAY': 0,
    'MAIL_SERVER': 'localhost',
    'MAIL_PORT': 587,
    'MAIL_USE_TLS': False,
    'MAIL_USE_SSL': False,
    'MAIL_DEFAULT_SENDER': 'noreply@nexupay.cl',
    'APP_BASE_URL': 'https://app.nexupay.cl'
}


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    app = create_app(TEST_CONFIG)
    return app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create an application context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def db_session(app_context):
    """Create a database session and clean up after tests."""
    db.create_all()
    yield db.session
    db.session.remove()
    db.drop_all()


@pytest.fixture
def test_debt(db_session):
    """Create an active debt."""
    debt = Debt(company_id='company-1', debtor_id='debtor-1', amount=150000, status='active')
    db_session.add(debt)
    db_session.commit()
    return debt


@pytest.fixture
def test_payment(db_session, test_debt):
    """Create a pending payment bound to a provider payment id."""
    payment = Payment(
        debt_id=test_debt.id,
        company_id='company-1',
        amount=150000,
        status='pending',
        mercadopago_payment_id='123456789'
    )
    db_session.add(payment)
    db_session.commit()
    return payment


@pytest.fixture
def welcome_template(db_session):
    """Create an active email template."""
    template = EmailTemplate(
        name='welcome',
        subject='Bienvenido',
        html_content='<p>Hola {{name}}, tu deuda es {{amount}}</p>',
        text_content='Hola {{name}}, tu deuda es {{amount}}',
        is_active=True
    )
    db_session.add(template)
    db_session.commit()
    return template


def make_response(status_code=200, json_body=None, text=''):
    """Build a fake requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = 'Error' if status_code >= 400 else 'OK'
    if json_body is None:
        response.content = text.encode()
        response.text = text
        response.json.side_effect = ValueError('No JSON')
    else:
        response.content = b'json'
        response.text = str(json_body)
        response.json.return_value = json_body
    return response


@pytest.fixture
def fake_response():
    """Factory for fake requests.Response objects."""
    return make_response
