
def _sample(body, name, **labels):
    """Value of the sample `name{labels}` in a text exposition, or 0."""
    for line in body.splitlines():
        if not line.startswith(name + '{'):
            continue
        if all(f'{key}="{value}"' in line for key, value in labels.items()):
            return float(line.rsplit(' ', 1)[1])
    return 0.0


def test_metrics_endpoint_exposes_prometheus(app):
    with app.test_client() as client:
        client.get('/health')
        resp = client.get('/metrics')
        assert resp.status_code == 200
        body = resp.data.decode('utf-8')
        assert 'np_http_requests_total' in body
        assert 'np_http_request_latency_seconds' in body
        assert resp.mimetype.startswith('text/plain')


def test_request_counter_increments(app):
    with app.test_client() as client:
        before = _sample(client.get('/metrics').data.decode('utf-8'),
                         'np_http_requests_total', endpoint='main.health', status='200')
        client.get('/health')
        client.get('/health')
        after = _sample(client.get('/metrics').data.decode('utf-8'),
                        'np_http_requests_total', endpoint='main.health', status='200')
        assert after - before == 2


def test_webhook_events_counted(app, db_session):
    with app.test_client() as client:
        before = _sample(client.get('/metrics').data.decode('utf-8'),
                         'np_webhook_events_total', type='merchant_order', outcome='ignored')
        client.post('/webhooks/mercadopago', json={'type': 'merchant_order', 'data': {'id': '1'}})
        body = client.get('/metrics').data.decode('utf-8')
        assert _sample(body, 'np_webhook_events_total', type='merchant_order', outcome='ignored') == before + 1
