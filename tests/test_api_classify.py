"""HTTP tests for the /api/v1 classification endpoints."""
from clientscan import create_app

from sample_agents import UA_CHROME_ANDROID, UA_EDGE_WIN, UA_FIREFOX_WIN, UA_PLAYBOOK


def test_post_classify_edge(client):
    r = client.post('/api/v1/classify', json={'user_agent': UA_EDGE_WIN, 'vendor': ''})
    assert r.status_code == 200
    data = r.get_json()
    assert data['browser'] == 'Edge'
    assert data['browser_version'] == '120.0.2210.91'
    assert data['engine'] == 'Blink'
    assert data['platform'] == 'Desktop'
    assert data['detection_methods'] == ['vendor_string', 'user_agent', 'feature_probe']
    assert data['failures'] == []


def test_post_classify_falls_back_to_request_user_agent(client):
    r = client.post('/api/v1/classify', json={}, headers={'User-Agent': UA_FIREFOX_WIN})
    assert r.status_code == 200
    assert r.get_json()['browser'] == 'Firefox'


def test_post_classify_brand_list_version(client):
    r = client.post('/api/v1/classify', json={
        'user_agent': UA_EDGE_WIN,
        'brands': [{'brand': 'Microsoft Edge', 'version': '121.0.2277.83'}],
    })
    data = r.get_json()
    assert data['browser'] == 'Edge'
    assert data['browser_version'] == '121.0.2277.83'
    assert 'capability_api' in data['detection_methods']


def test_post_classify_rejects_bad_types(client):
    r = client.post('/api/v1/classify', json={'user_agent': UA_EDGE_WIN, 'has_touch': 'maybe'})
    assert r.status_code == 400
    data = r.get_json()
    assert data['error'] is True
    assert data['error_code'] == 'INVALID_SIGNAL'
    assert data['details']['field'] == 'has_touch'


def test_post_classify_rejects_non_finite_number(client):
    body = '{"user_agent": "x", "viewport_width": Infinity}'
    r = client.post('/api/v1/classify', data=body, content_type='application/json')
    assert r.status_code == 400
    data = r.get_json()
    assert data['error_code'] == 'INVALID_SIGNAL'
    assert data['details']['field'] == 'viewport_width'


def test_post_classify_rejects_non_json(client):
    r = client.post('/api/v1/classify', data='not json', content_type='text/plain')
    assert r.status_code == 400
    assert r.get_json()['error_code'] == 'INVALID_SIGNAL'


def test_get_classify_from_headers(client):
    r = client.get('/api/v1/classify', headers={
        'User-Agent': UA_CHROME_ANDROID,
        'Sec-CH-UA-Full-Version-List': '"Not_A Brand";v="8.0.0.0", "Google Chrome";v="120.0.6099.144"',
        'Sec-CH-UA-Mobile': '?1',
    })
    assert r.status_code == 200
    data = r.get_json()
    assert data['browser'] == 'Chrome'
    assert data['browser_version'] == '120.0.6099.144'
    assert data['platform'] == 'Mobile'
    assert data['os'] == 'Android'
    assert data['os_version'] == 'Android 14 (Upside Down Cake)'


def test_requests_are_classified_independently(client):
    first = client.post('/api/v1/classify', json={'user_agent': UA_FIREFOX_WIN}).get_json()
    second = client.post('/api/v1/classify', json={'user_agent': UA_EDGE_WIN, 'vendor': ''}).get_json()
    assert (first['browser'], second['browser']) == ('Firefox', 'Edge')


def test_resolve_version_endpoint(client):
    r = client.post('/api/v1/version/edge', json={'user_agent': UA_EDGE_WIN})
    assert r.status_code == 200
    assert r.get_json() == {
        'browser': 'Edge',
        'browser_version': '120.0.2210.91',
        'engine': 'Blink',
        'engine_version': '120.0.2210.91',
    }


def test_resolve_version_unknown_label(client):
    r = client.post('/api/v1/version/netscape', json={'user_agent': UA_EDGE_WIN})
    assert r.status_code == 404
    assert r.get_json()['error_code'] == 'UNKNOWN_LABEL'


def test_device_endpoint(client):
    r = client.post('/api/v1/device', json={'user_agent': UA_PLAYBOOK})
    assert r.status_code == 200
    data = r.get_json()
    assert data['device_class'] == 'tablet'
    assert data['platform'] == 'Tablet'


def test_health_and_version(client):
    r = client.get('/api/v1/health')
    assert r.status_code == 200
    assert r.get_json()['status'] == 'ok'
    r2 = client.get('/version')
    data = r2.get_json()
    assert 'Internet Explorer' in data['labels']
    assert data['extractors'] == ['capability_api', 'vendor_string', 'user_agent', 'feature_probe']
    assert client.get('/api/v1/version').get_json()['version'] == data['version']


def test_prometheus_endpoint_reports_classifications(client):
    client.post('/api/v1/classify', json={'user_agent': UA_FIREFOX_WIN})
    r = client.get('/metrics/prometheus')
    assert r.status_code == 200
    assert r.content_type.startswith('text/plain')
    assert b'clientscan_classifications_total{label="Firefox"}' in r.data


def test_rate_limit_applies_to_api_but_not_health(monkeypatch):
    monkeypatch.setenv('CLIENTSCAN_RATE_LIMIT', '2 per minute')
    app = create_app()
    app.testing = True
    client = app.test_client()
    codes = [client.post('/api/v1/classify', json={'user_agent': UA_FIREFOX_WIN}).status_code for _ in range(3)]
    assert codes == [200, 200, 429]
    assert all(client.get('/health').status_code == 200 for _ in range(4))
