"""Location autocomplete backed by a Nominatim-compatible search endpoint."""
import logging

import requests
from flask import current_app

from sportmeet.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_QUERY_LENGTH = 200


def _to_suggestion(item):
    if not isinstance(item, dict):
        return None
    try:
        latitude = float(item.get('lat'))
        longitude = float(item.get('lon'))
    except (TypeError, ValueError):
        return None
    name = str(item.get('display_name') or item.get('name') or '').strip()
    if not name:
        return None
    return {'name': name, 'latitude': latitude, 'longitude': longitude}


def search_locations(query):
    """Return ``[{name, latitude, longitude}, ...]`` candidates for ``query``.

    Short queries return nothing without calling out. Any upstream failure
    raises UpstreamUnavailable so callers can fall back to manual text.
    """
    text = str(query or '').strip()[:MAX_QUERY_LENGTH]
    if len(text) < MIN_QUERY_LENGTH:
        return []
    if not current_app.config.get('GEOCODER_ENABLED', True):
        raise UpstreamUnavailable()

    try:
        response = requests.get(
            current_app.config['GEOCODER_URL'],
            params={
                'q': text,
                'format': 'json',
                'addressdetails': 0,
                'limit': current_app.config.get('GEOCODER_LIMIT', 5),
            },
            headers={'User-Agent': current_app.config.get('GEOCODER_USER_AGENT', 'sportmeet/1.0')},
            timeout=current_app.config.get('GEOCODER_TIMEOUT_SECONDS', 5),
        )
    except requests.RequestException as exc:
        logger.warning('Geocoder request failed: %s', exc)
        raise UpstreamUnavailable() from exc

    if response.status_code != 200:
        logger.warning('Geocoder returned HTTP %s', response.status_code)
        raise UpstreamUnavailable()

    try:
        payload = response.json()
    except ValueError as exc:
        logger.warning('Geocoder returned invalid JSON')
        raise UpstreamUnavailable() from exc
    if not isinstance(payload, list):
        raise UpstreamUnavailable()

    suggestions = []
    for item in payload:
        suggestion = _to_suggestion(item)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions
