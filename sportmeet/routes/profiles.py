"""Player profiles keyed by identity-provider user id, plus the dashboard."""
import logging
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError
from sportmeet.app import db
from sportmeet.models import Game, Profile
from sportmeet.auth_utils import login_required
from sportmeet.errors import ProfileNotFound, ValidationError

logger = logging.getLogger(__name__)

profiles_bp = Blueprint('profiles', __name__)

PROFILE_FIELDS = {
    'name': 120,
    'location': 200,
    'interest': 200,
    'level': 50,
    'description': 5000,
}


def _clean_profile_fields(data):
    cleaned = {}
    for field, max_len in PROFILE_FIELDS.items():
        value = data.get(field)
        cleaned[field] = str(value).strip()[:max_len] if value is not None else ''
    return cleaned


def _find_profile(external_id):
    return Profile.query.filter_by(external_id=external_id).first()


def _save_profile(external_id, fields, overwrite):
    """Insert or update the profile for ``external_id``; returns ``(profile, created)``.

    Two first requests for the same user can both miss the lookup. The loser
    of the insert hits the unique constraint, rolls back and continues with
    the row the winner committed.
    """
    profile = _find_profile(external_id)
    if profile is None:
        profile = Profile(external_id=external_id, **fields)
        db.session.add(profile)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            profile = _find_profile(external_id)
            if profile is None:
                raise
            logger.info('Profile for %s was created concurrently', external_id)
        else:
            logger.info('Created profile for %s', external_id)
            return profile, True

    if overwrite:
        for field, value in fields.items():
            setattr(profile, field, value)
        db.session.commit()
        logger.info('Updated profile for %s', external_id)
    return profile, False


@profiles_bp.route('/profile', methods=['POST'])
@login_required
def upsert_profile():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    fields = _clean_profile_fields(data)

    profile, created = _save_profile(request.current_identity.user_id, fields, overwrite=True)
    return jsonify({'profile': profile.to_dict()}), 201 if created else 200


@profiles_bp.route('/profile', methods=['GET'])
@login_required
def get_own_profile():
    profile = _find_profile(request.current_identity.user_id)
    if not profile:
        raise ProfileNotFound()
    return jsonify({'profile': profile.to_dict()})


@profiles_bp.route('/dashboard/<user_id>', methods=['GET'])
def get_dashboard(user_id):
    """Profile (created empty on first visit) and the games this user created."""
    profile, _ = _save_profile(user_id, {field: '' for field in PROFILE_FIELDS}, overwrite=False)
    games = Game.query.filter_by(creator_id=user_id).order_by(Game.time.desc()).all()
    return jsonify({
        'profile': profile.to_dict(),
        'games': [game.to_dict() for game in games],
    })
