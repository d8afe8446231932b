import logging
from flask import Blueprint, request, jsonify
from sportmeet.app import db, socketio
from sportmeet.models import Game
from sportmeet.auth_utils import login_required, get_optional_identity
from sportmeet.errors import GameNotFound, ValidationError
from sportmeet.services.game_payloads import normalize_game_payload, parse_coordinates
from sportmeet.services.proximity import NEARBY_RADIUS_KM, find_nearby
from sportmeet.services import roster

logger = logging.getLogger(__name__)

games_bp = Blueprint('games', __name__)


def _broadcast_game_update(game):
    socketio.emit('game_update', {'game': game.to_dict()})


def _roster_user_id():
    """User id for join/leave: the body's ``user_id``, else the caller's identity."""
    data = request.get_json(silent=True) or {}
    user_id = str(data.get('user_id') or '').strip()
    if not user_id:
        identity = get_optional_identity()
        if identity is not None:
            user_id = identity.user_id
    if not user_id:
        raise ValidationError('user_id is required')
    return user_id


@games_bp.route('', methods=['GET'])
def get_games():
    """List every game, soonest first."""
    games = Game.query.order_by(Game.time.asc()).all()
    return jsonify({'games': [game.to_dict() for game in games]})


@games_bp.route('/nearby', methods=['GET'])
@login_required
def get_nearby_games():
    lat, lon = parse_coordinates(request.args.get('lat'), request.args.get('lon'))
    radius_km = NEARBY_RADIUS_KM

    results = []
    for game, distance in find_nearby(lat, lon, Game.query.all(), radius_km=radius_km):
        game_dict = game.to_dict()
        game_dict['distance_km'] = distance
        results.append(game_dict)
    return jsonify({'games': results, 'radius_km': radius_km})


@games_bp.route('/<game_id>', methods=['GET'])
def get_game(game_id):
    game = db.session.get(Game, game_id)
    if not game:
        raise GameNotFound()
    return jsonify({'game': game.to_dict()})


@games_bp.route('', methods=['POST'])
@login_required
def create_game():
    identity = request.current_identity
    values = normalize_game_payload(request.get_json(silent=True), creator_email=identity.email)

    game = Game(creator_id=identity.user_id, **values)
    # Creator is always the first player.
    game.set_players([identity.user_id])
    db.session.add(game)
    db.session.commit()
    logger.info('Game %s (%s) created by %s', game.id, game.sport, identity.user_id)
    return jsonify({'message': 'Game created successfully', 'game': game.to_dict()}), 201


@games_bp.route('/<game_id>/join', methods=['POST'])
def join_game(game_id):
    user_id = _roster_user_id()
    game = roster.join_game(game_id, user_id)
    _broadcast_game_update(game)
    return jsonify({'message': 'Joined successfully', 'game': game.to_dict()})


@games_bp.route('/<game_id>/leave', methods=['POST'])
def leave_game(game_id):
    user_id = _roster_user_id()
    game = roster.leave_game(game_id, user_id)
    _broadcast_game_update(game)
    return jsonify({'message': 'Left the game', 'game': game.to_dict()})


@games_bp.route('/<game_id>', methods=['DELETE'])
@login_required
def delete_game(game_id):
    roster.delete_game(game_id, request.current_identity.user_id)
    socketio.emit('game_deleted', {'game_id': game_id})
    return jsonify({'message': 'Game deleted successfully'})
