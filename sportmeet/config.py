import os

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def _normalize_database_url(raw_url):
    if not raw_url:
        return raw_url
    if raw_url.startswith('postgres://'):
        return raw_url.replace('postgres://', 'postgresql://', 1)
    return raw_url


class BaseConfig:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-prod')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'threading')

    # Identity provider tokens: JWKS (RS256) when a URL is set, else shared secret (HS256).
    IDENTITY_JWKS_URL = os.environ.get('IDENTITY_JWKS_URL', '')
    IDENTITY_JWT_SECRET = os.environ.get('IDENTITY_JWT_SECRET', '')
    IDENTITY_ISSUER = os.environ.get('IDENTITY_ISSUER', '')
    IDENTITY_AUDIENCE = os.environ.get('IDENTITY_AUDIENCE', '')

    ROSTER_MAX_RETRIES = _env_int('ROSTER_MAX_RETRIES', 5)

    GEOCODER_URL = os.environ.get(
        'GEOCODER_URL', 'https://nominatim.openstreetmap.org/search'
    )
    GEOCODER_USER_AGENT = os.environ.get('GEOCODER_USER_AGENT', 'sportmeet/1.0')
    GEOCODER_TIMEOUT_SECONDS = _env_float('GEOCODER_TIMEOUT_SECONDS', 5.0)
    GEOCODER_LIMIT = _env_int('GEOCODER_LIMIT', 5)
    GEOCODER_ENABLED = _env_bool('GEOCODER_ENABLED', True)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(
        os.environ.get(
            'DATABASE_URL',
            'sqlite:///' + os.path.join(basedir, '..', 'sportmeet_dev.db')
        )
    )


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    IDENTITY_JWKS_URL = ''
    IDENTITY_JWT_SECRET = 'test-identity-secret-for-pytest-only-0123456789'
    IDENTITY_ISSUER = ''
    IDENTITY_AUDIENCE = ''
    ROSTER_MAX_RETRIES = 5
    GEOCODER_URL = 'https://geocoder.test/search'
    GEOCODER_ENABLED = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(os.environ.get('DATABASE_URL'))


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
