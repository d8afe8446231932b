"""Error kinds surfaced by the API.

Each error carries the HTTP status it maps to and a user-facing message.
`register_error_handlers` renders them as ``{'error': ..., 'kind': ...}``.
"""
import logging

from flask import jsonify
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    kind = 'server_error'
    message = 'Server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class ValidationError(ApiError):
    status_code = 400
    kind = 'validation_error'
    message = 'Invalid request'


class NotFound(ApiError):
    status_code = 404
    kind = 'not_found'
    message = 'Not found'


class GameNotFound(NotFound):
    message = 'Game not found'


class ProfileNotFound(NotFound):
    message = 'Profile not found'


class Unauthorized(ApiError):
    status_code = 401
    kind = 'unauthorized'
    message = 'Authentication required'


class Forbidden(ApiError):
    status_code = 403
    kind = 'forbidden'
    message = 'Not authorized'


class Conflict(ApiError):
    status_code = 400
    kind = 'conflict'
    message = 'Conflict'


class AlreadyJoined(Conflict):
    kind = 'already_joined'
    message = 'Already joined'


class GameFull(Conflict):
    kind = 'game_full'
    message = 'Game is full'


class RosterConflict(Conflict):
    """Optimistic retries ran out while other writers kept changing the roster."""
    status_code = 409
    kind = 'roster_conflict'
    message = 'Game was updated by someone else, please try again'


class StoreUnavailable(ApiError):
    status_code = 503
    kind = 'store_unavailable'
    message = 'Service temporarily unavailable'


class UpstreamUnavailable(ApiError):
    status_code = 502
    kind = 'upstream_unavailable'
    message = 'Location lookup is unavailable'


def register_error_handlers(app, db):
    @app.errorhandler(ApiError)
    def _handle_api_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _handle_store_error(exc):
        db.session.rollback()
        logger.exception('Store failure while handling request')
        if isinstance(exc, (OperationalError, DisconnectionError)):
            return _handle_api_error(StoreUnavailable())
        return jsonify({'error': 'Server error', 'kind': 'server_error'}), 500
