import logging
from flask import Flask, request, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from flask_cors import CORS
from sportmeet.config import config

db = SQLAlchemy()
socketio = SocketIO()

logger = logging.getLogger(__name__)


def _parse_allowed_origins(raw_origins):
    if not raw_origins:
        return '*'

    if isinstance(raw_origins, (list, tuple, set)):
        cleaned = [origin for origin in raw_origins if origin]
        return cleaned or '*'

    raw_text = str(raw_origins).strip()
    if not raw_text or raw_text == '*':
        return '*'

    origins = [origin.strip() for origin in raw_text.split(',') if origin.strip()]
    return origins or '*'


def _configure_logging(app):
    level_name = str(app.config.get('LOG_LEVEL') or 'INFO').upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logging.getLogger('sportmeet').setLevel(level)
    app.logger.setLevel(level)


def _check_production_settings(app, allowed_origins):
    secret_key = str(app.config.get('SECRET_KEY') or '').strip()
    if not secret_key or secret_key == 'dev-secret-key-change-in-prod':
        raise RuntimeError('SECRET_KEY must be set to a non-default value in production')
    if allowed_origins == '*':
        raise RuntimeError('CORS_ALLOWED_ORIGINS must be explicitly set in production')
    if not app.config.get('IDENTITY_JWKS_URL') and not app.config.get('IDENTITY_JWT_SECRET'):
        raise RuntimeError('IDENTITY_JWKS_URL or IDENTITY_JWT_SECRET must be set in production')
    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        raise RuntimeError('DATABASE_URL must be set in production')


def shutdown_store(app):
    """Release pooled database connections held by the engine."""
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    logger.info('Database connections released')


def create_app(config_name='development'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    _configure_logging(app)

    allowed_origins = _parse_allowed_origins(app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    if str(config_name).strip().lower() == 'production':
        _check_production_settings(app, allowed_origins)

    db.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'),
    )
    CORS(app, resources={r'/api/*': {'origins': allowed_origins}})

    @app.before_request
    def _enforce_origin_for_mutating_api_requests():
        if request.method in {'GET', 'HEAD', 'OPTIONS'}:
            return None
        if not request.path.startswith('/api/'):
            return None

        origin = str(request.headers.get('Origin') or '').strip()
        if not origin:
            return None

        if allowed_origins != '*' and origin not in allowed_origins:
            return jsonify({'error': 'Invalid request origin', 'kind': 'forbidden'}), 403
        return None

    from sportmeet.errors import register_error_handlers
    from sportmeet.routes.games import games_bp
    from sportmeet.routes.profiles import profiles_bp
    from sportmeet.routes.locations import locations_bp

    register_error_handlers(app, db)
    app.register_blueprint(games_bp, url_prefix='/api/games')
    app.register_blueprint(profiles_bp, url_prefix='/api')
    app.register_blueprint(locations_bp, url_prefix='/api/locations')

    @app.route('/')
    def index():
        return jsonify({'message': 'API is running'})

    with app.app_context():
        from sportmeet import models  # noqa: F401
        db.create_all()

    logger.info('App created with %s config', config_name)
    return app
