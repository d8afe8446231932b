from flask import Blueprint, request, jsonify
from sportmeet.errors import UpstreamUnavailable
from sportmeet.services.geocoding import search_locations

locations_bp = Blueprint('locations', __name__)


@locations_bp.route('/search', methods=['GET'])
def search():
    """Autocomplete suggestions for the create-game location field."""
    try:
        suggestions = search_locations(request.args.get('q', ''))
    except UpstreamUnavailable as exc:
        payload = exc.to_dict()
        payload['suggestions'] = []
        return jsonify(payload), exc.status_code
    return jsonify({'suggestions': suggestions})
