import pytest
from sportmeet.app import create_app, db
from sportmeet.auth_utils import generate_token
from sportmeet.config import TestingConfig


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_app(tmp_path, monkeypatch):
    """App backed by an on-disk SQLite file so separate connections see each other's commits."""
    monkeypatch.setattr(
        TestingConfig, 'SQLALCHEMY_DATABASE_URI', f'sqlite:///{tmp_path / "sportmeet.db"}'
    )
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_token(app):
    """Issue identity-provider tokens for arbitrary users."""
    def _make(user_id, email=None):
        return generate_token(user_id, email if email is not None else f'{user_id}@example.com')
    return _make


@pytest.fixture
def auth_headers(make_token):
    """Auth headers for the default test user 'user_host'."""
    token = make_token('user_host', 'host@example.com')
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}
