"""Nearby-game search over API-geocoded games.

Distances are great-circle distances on a sphere of radius 6371 km using the
haversine formula. The search is a linear scan over every game passed in;
that is fine at meetup scale, but a large deployment would want a spatial
index in the store instead.
"""
import math

EARTH_RADIUS_KM = 6371.0
NEARBY_RADIUS_KM = 25.0


def haversine_km(lat1, lon1, lat2, lon2):
    """Great-circle distance in kilometres between two lat/lon points in degrees."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlon / 2) ** 2)
    # Rounding can push a a hair past 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def find_nearby(ref_lat, ref_lon, games, radius_km=NEARBY_RADIUS_KM):
    """Return ``[(game, distance_km), ...]`` within ``radius_km``, nearest first.

    Games with only a manual text location are skipped. Equal distances keep
    the order in which ``games`` yielded them.
    """
    results = []
    for game in games:
        if not game.has_coordinates:
            continue
        distance = haversine_km(ref_lat, ref_lon, game.api_latitude, game.api_longitude)
        if distance <= radius_km:
            results.append((game, distance))
    results.sort(key=lambda item: item[1])
    return results
