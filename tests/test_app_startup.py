"""Tests for app startup helpers and production settings checks."""
import pytest

from sportmeet.app import _parse_allowed_origins, create_app
from sportmeet.config import ProductionConfig


def test_parse_allowed_origins():
    assert _parse_allowed_origins('') == '*'
    assert _parse_allowed_origins(' * ') == '*'
    assert _parse_allowed_origins('https://a.example.com, https://b.example.com,') == [
        'https://a.example.com', 'https://b.example.com',
    ]
    assert _parse_allowed_origins(['', 'https://a.example.com']) == ['https://a.example.com']


def test_production_rejects_default_secret(monkeypatch):
    monkeypatch.setattr(ProductionConfig, 'SECRET_KEY', 'dev-secret-key-change-in-prod')
    with pytest.raises(RuntimeError, match='SECRET_KEY'):
        create_app('production')


def test_production_rejects_wildcard_cors(monkeypatch):
    monkeypatch.setattr(ProductionConfig, 'SECRET_KEY', 'a-real-secret')
    monkeypatch.setattr(ProductionConfig, 'CORS_ALLOWED_ORIGINS', '*')
    with pytest.raises(RuntimeError, match='CORS_ALLOWED_ORIGINS'):
        create_app('production')


def test_production_requires_identity_verification(monkeypatch):
    monkeypatch.setattr(ProductionConfig, 'SECRET_KEY', 'a-real-secret')
    monkeypatch.setattr(ProductionConfig, 'CORS_ALLOWED_ORIGINS', 'https://app.example.com')
    monkeypatch.setattr(ProductionConfig, 'IDENTITY_JWKS_URL', '')
    monkeypatch.setattr(ProductionConfig, 'IDENTITY_JWT_SECRET', '')
    with pytest.raises(RuntimeError, match='IDENTITY'):
        create_app('production')


def test_mutating_request_from_unknown_origin_is_rejected(monkeypatch):
    from sportmeet.config import TestingConfig
    monkeypatch.setattr(TestingConfig, 'CORS_ALLOWED_ORIGINS', 'https://app.example.com')
    app = create_app('testing')
    client = app.test_client()

    res = client.post(
        '/api/games/any/join', json={'user_id': 'u'},
        headers={'Origin': 'https://evil.example.com'},
    )
    assert res.status_code == 403


def test_store_failure_is_reported_without_detail(client, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from sportmeet.services import roster

    def broken_load(game_id):
        raise OperationalError('SELECT 1', {}, Exception('connection refused at 10.0.0.5'))

    monkeypatch.setattr(roster, '_load_game', broken_load)
    res = client.post('/api/games/abc/join', json={'user_id': 'u'})
    assert res.status_code == 503
    body = res.get_json()
    assert body['kind'] == 'store_unavailable'
    assert '10.0.0.5' not in body['error']


def test_shutdown_store_releases_connections(file_app):
    from sportmeet.app import db, shutdown_store

    client = file_app.test_client()
    assert client.get('/api/games').status_code == 200
    pool_before = db.engine.pool

    shutdown_store(file_app)

    assert db.engine.pool is not pool_before
    assert db.engine.pool.checkedout() == 0
    # The engine reconnects on demand after a dispose.
    assert client.get('/api/games').status_code == 200
