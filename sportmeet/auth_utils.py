import logging
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
import jwt
from sportmeet.errors import Unauthorized

logger = logging.getLogger(__name__)

Identity = namedtuple('Identity', ['user_id', 'email'])

_jwks_clients = {}


def generate_token(user_id, email='', expires_in=timedelta(hours=1)):
    """Issue an HS256 identity token. Used by local development and tests."""
    payload = {
        'sub': user_id,
        'email': email,
        'exp': datetime.now(timezone.utc) + expires_in,
    }
    issuer = current_app.config.get('IDENTITY_ISSUER')
    if issuer:
        payload['iss'] = issuer
    audience = current_app.config.get('IDENTITY_AUDIENCE')
    if audience:
        payload['aud'] = audience
    return jwt.encode(payload, _shared_secret(), algorithm='HS256')


def _shared_secret():
    return current_app.config.get('IDENTITY_JWT_SECRET') or current_app.config['SECRET_KEY']


def _jwks_client(url):
    client = _jwks_clients.get(url)
    if client is None:
        client = jwt.PyJWKClient(url)
        _jwks_clients[url] = client
    return client


def _normalize_bearer_token(raw_token):
    token = str(raw_token or '').strip()
    if token.startswith('Bearer '):
        token = token.split(' ', 1)[1].strip()
    return token


def _decode_options():
    issuer = current_app.config.get('IDENTITY_ISSUER') or None
    audience = current_app.config.get('IDENTITY_AUDIENCE') or None
    return {
        'issuer': issuer,
        'audience': audience,
        'options': {'require': ['exp', 'sub'], 'verify_aud': audience is not None},
    }


def _decode_identity_from_token(token):
    normalized = _normalize_bearer_token(token)
    if not normalized:
        return None, 'Authentication required'
    jwks_url = current_app.config.get('IDENTITY_JWKS_URL')
    try:
        if jwks_url:
            signing_key = _jwks_client(jwks_url).get_signing_key_from_jwt(normalized)
            payload = jwt.decode(
                normalized, signing_key.key, algorithms=['RS256'], **_decode_options()
            )
        else:
            payload = jwt.decode(
                normalized, _shared_secret(), algorithms=['HS256'], **_decode_options()
            )
    except jwt.ExpiredSignatureError:
        return None, 'Token expired'
    except jwt.PyJWKClientError:
        logger.warning('Unable to fetch identity provider signing keys')
        return None, 'Unable to verify token'
    except jwt.InvalidTokenError as exc:
        logger.warning('Rejected identity token: %s', exc)
        return None, 'Invalid token'

    user_id = str(payload.get('sub') or '').strip()
    if not user_id:
        return None, 'Invalid token'
    return Identity(user_id=user_id, email=str(payload.get('email') or '').strip()), None


def get_optional_identity():
    """Resolve the caller's identity if a valid bearer token is present."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header:
        return None
    identity, _ = _decode_identity_from_token(auth_header)
    return identity


def login_required(f):
    """Decorator to require an identity-provider token on a route."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization', '')
        identity, error = _decode_identity_from_token(auth_header)
        if error:
            return jsonify(Unauthorized(error).to_dict()), Unauthorized.status_code
        request.current_identity = identity
        return f(*args, **kwargs)
    return decorated
