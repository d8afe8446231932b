"""Payload helpers for creating Game records and reading coordinates."""

import math

from sportmeet.errors import ValidationError
from sportmeet.time_utils import parse_iso_to_utc_naive

_STRING_LIMITS = {
    'sport': 100,
    'creator_email': 255,
    'manual_location': 500,
    'api_location_name': 500,
}
MAX_PLAYERS_LIMIT = 1000


def _clean_text(value, max_len):
    if value is None:
        return ''
    text = str(value).strip()
    if len(text) > max_len:
        return text[:max_len]
    return text


def _parse_float(value):
    if value is None or value == '' or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _parse_positive_int(value):
    if value is None or value == '' or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if parsed <= 0:
        return None
    return parsed


def parse_coordinates(raw_lat, raw_lon):
    """Parse and range-check a latitude/longitude pair, raising ValidationError."""
    if raw_lat in (None, '') or raw_lon in (None, ''):
        raise ValidationError('Latitude and Longitude are required')
    lat = _parse_float(raw_lat)
    lon = _parse_float(raw_lon)
    if lat is None or lon is None:
        raise ValidationError('Latitude and Longitude must be numbers')
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise ValidationError('Latitude must be within -90..90 and Longitude within -180..180')
    return lat, lon


def _normalize_api_location(raw):
    if not isinstance(raw, dict):
        return None
    if raw.get('latitude') is None or raw.get('longitude') is None:
        return None
    lat, lon = parse_coordinates(raw.get('latitude'), raw.get('longitude'))
    return {
        'api_location_name': _clean_text(raw.get('name'), _STRING_LIMITS['api_location_name']),
        'api_latitude': lat,
        'api_longitude': lon,
    }


def normalize_game_payload(data, creator_email=''):
    """Validate a create-game request body into Game column values."""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    sport = _clean_text(data.get('sport'), _STRING_LIMITS['sport'])
    email = _clean_text(creator_email or data.get('creator_email'), _STRING_LIMITS['creator_email'])
    if not sport or not data.get('time') or data.get('max_players') in (None, '') or not email:
        raise ValidationError('Missing required fields')

    game_time = parse_iso_to_utc_naive(data.get('time'))
    if game_time is None:
        raise ValidationError('time must be an ISO 8601 timestamp')

    max_players = _parse_positive_int(data.get('max_players'))
    if max_players is None:
        raise ValidationError('max_players must be a positive integer')
    if max_players > MAX_PLAYERS_LIMIT:
        raise ValidationError(f'max_players cannot exceed {MAX_PLAYERS_LIMIT}')

    api_location = _normalize_api_location(data.get('api_location'))
    manual_location = _clean_text(data.get('manual_location'), _STRING_LIMITS['manual_location'])
    if api_location is None and not manual_location:
        raise ValidationError('At least one location (API or Manual) is required')
    if api_location is not None and manual_location:
        raise ValidationError('Provide either an API location or a manual location, not both')

    values = {
        'sport': sport,
        'creator_email': email,
        'time': game_time,
        'max_players': max_players,
        'api_location_name': None,
        'api_latitude': None,
        'api_longitude': None,
        'manual_location': manual_location or None,
    }
    if api_location is not None:
        values.update(api_location)
    return values
