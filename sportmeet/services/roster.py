"""Join, leave and delete operations on a game's roster.

Every write is an optimistic read-modify-write: the ``game`` row carries a
version counter, so an UPDATE or DELETE based on a roster that someone else
has since changed matches no rows and SQLAlchemy raises ``StaleDataError``.
We roll back, re-read the row and re-apply the rules, which keeps
``len(players) <= max_players`` under any interleaving of concurrent joins,
across processes as well as threads.
"""
import logging

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from sportmeet.app import db
from sportmeet.errors import AlreadyJoined, Forbidden, GameFull, GameNotFound, RosterConflict
from sportmeet.models import Game

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5


def _max_attempts():
    try:
        attempts = int(current_app.config.get('ROSTER_MAX_RETRIES', DEFAULT_MAX_RETRIES))
    except (TypeError, ValueError):
        attempts = DEFAULT_MAX_RETRIES
    return max(1, attempts)


def _load_game(game_id):
    # Always re-read the row so each attempt sees the latest committed version.
    return db.session.get(Game, game_id, populate_existing=True)


def _run_with_retries(game_id, mutate, action):
    attempts = _max_attempts()
    for attempt in range(1, attempts + 1):
        game = _load_game(game_id)
        if game is None:
            raise GameNotFound()
        result = mutate(game)
        try:
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            logger.warning(
                'Concurrent update on game %s during %s (attempt %d/%d)',
                game_id, action, attempt, attempts,
            )
            continue
        return result
    raise RosterConflict()


def join_game(game_id, user_id):
    """Append ``user_id`` to the roster, enforcing membership and capacity."""
    def mutate(game):
        players = list(game.players or [])
        if user_id in players:
            raise AlreadyJoined()
        if len(players) >= game.max_players:
            raise GameFull()
        game.set_players(players + [user_id])
        return game

    game = _run_with_retries(game_id, mutate, 'join')
    logger.info('User %s joined game %s (%d/%d)', user_id, game_id,
                len(game.players), game.max_players)
    return game


def leave_game(game_id, user_id):
    """Remove ``user_id`` from the roster. Leaving a game you are not in is a no-op."""
    def mutate(game):
        players = list(game.players or [])
        if user_id not in players:
            return game
        players.remove(user_id)
        game.set_players(players)
        return game

    game = _run_with_retries(game_id, mutate, 'leave')
    logger.info('User %s left game %s', user_id, game_id)
    return game


def delete_game(game_id, actor_id):
    """Delete a game. Only its creator may do so."""
    def mutate(game):
        if game.creator_id != actor_id:
            raise Forbidden('Not authorized to delete this game')
        db.session.delete(game)

    _run_with_retries(game_id, mutate, 'delete')
    logger.info('Game %s deleted by %s', game_id, actor_id)
