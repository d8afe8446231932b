import uuid
from sportmeet.app import db
from sportmeet.time_utils import utcnow_naive

GAME_STATUS_OPEN = 'open'
GAME_STATUS_FULL = 'full'


def _new_game_id():
    return uuid.uuid4().hex


class Profile(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    external_id = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), default='')
    location = db.Column(db.String(200), default='')
    interest = db.Column(db.String(200), default='')
    level = db.Column(db.String(50), default='')
    description = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(
        db.DateTime, default=lambda: utcnow_naive(), onupdate=lambda: utcnow_naive()
    )

    def to_dict(self):
        return {
            'id': self.id, 'external_id': self.external_id,
            'name': self.name or '', 'location': self.location or '',
            'interest': self.interest or '', 'level': self.level or '',
            'description': self.description or '',
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Game(db.Model):
    """A posted game. The roster lives on the row as an ordered list of user ids.

    ``version`` is bumped on every UPDATE and checked in its WHERE clause, so
    two writers that read the same roster cannot both commit.
    """
    id = db.Column(db.String(32), primary_key=True, default=_new_game_id)
    creator_id = db.Column(db.String(255), nullable=False, index=True)
    creator_email = db.Column(db.String(255), nullable=False)
    api_location_name = db.Column(db.String(500), nullable=True)
    api_latitude = db.Column(db.Float, nullable=True)
    api_longitude = db.Column(db.Float, nullable=True)
    manual_location = db.Column(db.String(500), nullable=True)
    sport = db.Column(db.String(100), nullable=False)
    time = db.Column(db.DateTime, nullable=False)
    max_players = db.Column(db.Integer, nullable=False)
    players = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.String(20), nullable=False, default=GAME_STATUS_OPEN)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    __mapper_args__ = {'version_id_col': version}

    @property
    def has_coordinates(self):
        return self.api_latitude is not None and self.api_longitude is not None

    @property
    def is_full(self):
        return len(self.players or []) >= self.max_players

    def set_players(self, players):
        # Assign a fresh list: in-place mutation of a JSON column is not tracked.
        self.players = list(players)
        self.status = GAME_STATUS_FULL if self.is_full else GAME_STATUS_OPEN

    def to_dict(self):
        api_location = None
        if self.has_coordinates:
            api_location = {
                'name': self.api_location_name or '',
                'latitude': self.api_latitude,
                'longitude': self.api_longitude,
            }
        players = list(self.players or [])
        return {
            'id': self.id, 'creator_id': self.creator_id,
            'creator_email': self.creator_email,
            'api_location': api_location,
            'manual_location': self.manual_location,
            'sport': self.sport,
            'time': self.time.isoformat() if self.time else None,
            'max_players': self.max_players,
            'players': players, 'player_count': len(players),
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
