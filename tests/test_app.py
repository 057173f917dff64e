import pytest
from nexupay import create_app
from conftest import TEST_CONFIG


def test_home_page(client):
    """Test that the home page reports the service when configured"""
    response = client.get('/')
    assert response.status_code == 200
    assert response.json['service'] == 'nexupay'
    assert response.json['app_url'] == 'https://app.nexupay.cl'


def test_health_endpoint(client):
    """Test the health check endpoint"""
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json['status'] == 'healthy'


def test_404_error(client):
    """Test that non-existent routes return a JSON 404"""
    response = client.get('/nonexistent')
    assert response.status_code == 404
    assert response.json['error'] == 'Not found'


def test_405_error(client):
    """Test that wrong methods return a JSON 405"""
    response = client.get('/webhooks/mercadopago')
    assert response.status_code == 405
    assert response.json == {'error': 'Method not allowed'}


def test_metrics_endpoint(client):
    """Test the Prometheus exposition"""
    client.get('/health')
    response = client.get('/metrics')
    assert response.status_code == 200
    assert b'np_http_requests_total' in response.data


def test_api_status(client):
    response = client.get('/api/status')
    assert response.status_code == 200
    assert response.json['status'] == 'operational'


class TestMaintenanceMode:
    """The maintenance screen is served when the backend is not configured."""

    @pytest.fixture
    def unconfigured_client(self):
        config = dict(TEST_CONFIG)
        config.pop('SUPABASE_URL')
        return create_app(config).test_client()

    def test_home_shows_maintenance(self, unconfigured_client):
        response = unconfigured_client.get('/')
        assert response.status_code == 503
        assert b'mantenimiento' in response.data
        assert b'<!DOCTYPE html>' in response.data

    def test_health_reports_maintenance(self, unconfigured_client):
        response = unconfigured_client.get('/health')
        assert response.status_code == 503
        assert response.json['status'] == 'maintenance'

    def test_forced_maintenance(self):
        config = dict(TEST_CONFIG, MAINTENANCE_MODE=True)
        response = create_app(config).test_client().get('/')
        assert response.status_code == 503


class TestDatabaseNotConfigured:
    """Without DATABASE_URL outside testing nothing is written to the in-memory fallback."""

    @pytest.fixture
    def production_app(self):
        return create_app(dict(TEST_CONFIG, TESTING=False))

    def test_health_reports_maintenance(self, production_app):
        response = production_app.test_client().get('/health')
        assert response.status_code == 503
        assert response.json['status'] == 'maintenance'

    def test_home_shows_maintenance(self, production_app):
        response = production_app.test_client().get('/')
        assert response.status_code == 503

    @pytest.mark.parametrize('path,body', [
        ('/webhooks/mercadopago', {'type': 'payment', 'data': {'id': '123456789'}}),
        ('/email/send', {'to': 'ana@example.com', 'subject': 'Hola', 'template': 'welcome'}),
        ('/api/reports', {'reportType': 'payment_summary'}),
    ])
    def test_writes_are_refused(self, production_app, path, body):
        response = production_app.test_client().post(path, json=body)
        assert response.status_code == 503
        assert response.json == {'error': 'Service unavailable', 'message': 'Database not configured'}

    def test_export_refused(self, production_app):
        response = production_app.test_client().get('/api/export/payments')
        assert response.status_code == 503

    def test_preflight_still_answered(self, production_app):
        response = production_app.test_client().open('/webhooks/mercadopago', method='OPTIONS')
        assert response.status_code == 200

    def test_navigation_still_served(self, production_app):
        response = production_app.test_client().get('/api/navigation?path=/company/debts')
        assert response.status_code == 200
