#!/usr/bin/env python3
"""
Tests for the payment provider webhook
"""

import uuid
import pytest
import requests
from unittest.mock import Mock
from nexupay.models import db, Payment, Debt
from nexupay.utils.payment_provider import PaymentProviderClient
from nexupay.utils.webhook_service import WebhookProcessor


def install_provider(app, provider):
    app.extensions['nexupay_webhook_processor'] = WebhookProcessor(provider)


class TestMercadoPagoWebhook:
    """Test the /webhooks/mercadopago endpoint"""

    def test_simulated_payment_is_approved(self, app, client, test_payment):
        """Without an access token the provider simulates an approved payment"""
        response = client.post('/webhooks/mercadopago', json={
            'type': 'payment',
            'action': 'payment.updated',
            'data': {'id': '123456789'}
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['message'] == 'Webhook processed successfully'
        assert data['received']['type'] == 'payment'
        assert data['received']['action'] == 'payment.updated'
        assert response.headers['Access-Control-Allow-Origin'] == '*'

        db.session.expire_all()
        payment = db.session.get(Payment, test_payment.id)
        assert payment.status == 'approved'
        assert payment.payment_metadata == {}

    def test_approved_payment_marks_debt_paid(self, app, client, test_payment, test_debt):
        provider = Mock()
        provider.get_payment.return_value = {
            'id': '123456789',
            'status': 'approved',
            'external_reference': str(test_debt.id),
            'metadata': {'installment': 1}
        }
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={
            'type': 'payment',
            'data': {'id': '123456789'}
        })

        assert response.status_code == 200
        provider.get_payment.assert_called_once_with('123456789')

        db.session.expire_all()
        assert db.session.get(Payment, test_payment.id).payment_metadata == {'installment': 1}
        debt = db.session.get(Debt, test_debt.id)
        assert debt.status == 'paid'
        assert debt.paid_at is not None

    def test_rejected_payment_leaves_debt_active(self, app, client, test_payment, test_debt):
        provider = Mock()
        provider.get_payment.return_value = {
            'id': '123456789',
            'status': 'rejected',
            'external_reference': str(test_debt.id),
            'metadata': {}
        }
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '123456789'}})

        assert response.status_code == 200
        db.session.expire_all()
        assert db.session.get(Payment, test_payment.id).status == 'rejected'
        assert db.session.get(Debt, test_debt.id).status == 'active'

    def test_approved_payment_marks_debt_paid_by_uuid_reference(self, app, client, test_payment, test_debt):
        assert len(test_debt.id) == 36
        provider = Mock()
        provider.get_payment.return_value = {
            'id': '123456789',
            'status': 'approved',
            'external_reference': test_debt.id,
            'metadata': {}
        }
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '123456789'}})

        assert response.status_code == 200
        db.session.expire_all()
        assert db.session.get(Debt, test_debt.id).status == 'paid'

    def test_debt_id_from_metadata_when_reference_missing(self, app, client, test_payment, test_debt):
        provider = Mock()
        provider.get_payment.return_value = {
            'id': '123456789',
            'status': 'approved',
            'external_reference': None,
            'metadata': {'debt_id': test_debt.id, 'debtor_id': 'debtor-1'}
        }
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '123456789'}})

        assert response.status_code == 200
        db.session.expire_all()
        assert db.session.get(Debt, test_debt.id).status == 'paid'

    def test_unknown_debt_reference_leaves_debts_untouched(self, app, client, test_payment, test_debt):
        provider = Mock()
        provider.get_payment.return_value = {
            'id': '123456789',
            'status': 'approved',
            'external_reference': str(uuid.uuid4()),
            'metadata': {}
        }
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '123456789'}})

        assert response.status_code == 200
        db.session.expire_all()
        assert db.session.get(Payment, test_payment.id).status == 'approved'
        assert db.session.get(Debt, test_debt.id).status == 'active'

    def test_missing_payment_id(self, client, db_session):
        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {}})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Payment ID missing'}

    def test_non_payment_event_is_ignored(self, app, client, db_session):
        provider = Mock()
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'merchant_order', 'data': {'id': '1'}})

        assert response.status_code == 200
        assert response.get_json()['success'] is True
        provider.get_payment.assert_not_called()

    def test_provider_unavailable_is_acknowledged(self, app, client, test_payment):
        provider = Mock()
        provider.get_payment.return_value = None
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '123456789'}})

        assert response.status_code == 200
        db.session.expire_all()
        assert db.session.get(Payment, test_payment.id).status == 'pending'

    def test_invalid_json(self, client, db_session):
        response = client.post('/webhooks/mercadopago', data='{not json',
                               content_type='application/json')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid JSON payload'

    def test_processing_error_returns_500(self, app, client, db_session):
        provider = Mock()
        provider.get_payment.side_effect = RuntimeError('provider exploded')
        install_provider(app, provider)

        response = client.post('/webhooks/mercadopago', json={'type': 'payment', 'data': {'id': '1'}})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Internal server error', 'message': 'provider exploded'}

    def test_options_preflight(self, client):
        response = client.open('/webhooks/mercadopago', method='OPTIONS')

        assert response.status_code == 200
        assert response.data == b''
        assert response.headers['Access-Control-Allow-Methods'] == 'GET, POST, OPTIONS'
        assert 'Content-Type' in response.headers['Access-Control-Allow-Headers']


class TestPaymentProviderClient:
    """Test the provider API client"""

    def test_fetch_payment(self, fake_response):
        session = Mock()
        session.get.return_value = fake_response(200, {
            'id': 987,
            'status': 'approved',
            'external_reference': '42',
            'metadata': None
        })
        provider = PaymentProviderClient('token-123', api_url='https://api.example.com/', session=session)

        details = provider.get_payment('987')

        assert details == {'id': '987', 'status': 'approved', 'external_reference': '42', 'metadata': {}}
        args, kwargs = session.get.call_args
        assert args[0] == 'https://api.example.com/v1/payments/987'
        assert kwargs['headers']['Authorization'] == 'Bearer token-123'

    def test_provider_error_returns_none(self, fake_response):
        session = Mock()
        response = fake_response(404, {'message': 'not found'})
        response.raise_for_status.side_effect = requests.HTTPError('404 Client Error')
        session.get.return_value = response
        provider = PaymentProviderClient('token-123', session=session)

        assert provider.get_payment('987') is None

    def test_network_error_returns_none(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError('unreachable')
        provider = PaymentProviderClient('token-123', session=session)

        assert provider.get_payment('987') is None

    def test_simulated_without_token(self):
        session = Mock()
        provider = PaymentProviderClient(None, session=session)

        details = provider.get_payment(555)

        assert details['id'] == '555'
        assert details['status'] == 'approved'
        session.get.assert_not_called()
