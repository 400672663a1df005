import os, logging
from clientscan import create_app

def _make_app():
    app = create_app()
    app.config['TESTING'] = True
    return app

def _restore_levels():
    logging.getLogger().setLevel(logging.WARNING)
    for name in ['clientscan', 'clientscan.api', 'clientscan.detector', 'clientscan.extractors',
                 'clientscan.fusion', 'clientscan.resolver', 'clientscan.cache', 'clientscan.admin']:
        logging.getLogger(name).setLevel(logging.NOTSET)

def test_admin_log_level_get_and_set_no_token():
    # Ensure no token set
    os.environ.pop('CLIENTSCAN_ADMIN_TOKEN', None)
    app = _make_app()
    client = app.test_client()
    r = client.get('/admin/log_level')
    assert r.status_code == 200
    data = r.get_json()
    assert data['status'] == 'ok'
    # Change level
    r2 = client.post('/admin/log_level', json={'level':'DEBUG'})
    assert r2.status_code == 200
    data2 = r2.get_json()
    assert data2['level'] == 'DEBUG'
    # Effective level applied
    assert logging.getLogger().getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger('clientscan.detector').getEffectiveLevel() == logging.DEBUG
    _restore_levels()

def test_admin_log_level_with_token_and_invalid_level(monkeypatch):
    monkeypatch.setenv('CLIENTSCAN_ADMIN_TOKEN', 'secret123')
    app = _make_app()
    client = app.test_client()
    # Missing token header
    r = client.post('/admin/log_level', json={'level':'INFO'})
    assert r.status_code == 401
    # Invalid level
    r2 = client.post('/admin/log_level', headers={'X-Admin-Token':'secret123'}, json={'level':'SILLY'})
    assert r2.status_code == 400
    # Valid change
    r3 = client.post('/admin/log_level', headers={'X-Admin-Token':'secret123'}, json={'level':'ERROR'})
    assert r3.status_code == 200
    assert logging.getLogger().getEffectiveLevel() == logging.ERROR
    _restore_levels()

def test_admin_suppressed_counters(monkeypatch):
    monkeypatch.delenv('CLIENTSCAN_ADMIN_TOKEN', raising=False)
    app = _make_app()
    client = app.test_client()

    def prober(prop, value):
        raise RuntimeError('probe failed')

    from clientscan.detector import classify_signal
    from clientscan.signals import ClientSignal
    classify_signal(ClientSignal(user_agent='Mozilla/5.0', style_prober=prober))
    r = client.get('/admin/suppressed')
    assert r.status_code == 200
    keys = list(r.get_json()['suppressed'])
    assert any('extractor=feature_probe' in k for k in keys)
    r2 = client.delete('/admin/suppressed')
    assert r2.get_json()['reset'] is True
    assert client.get('/admin/suppressed').get_json()['suppressed'] == {}
