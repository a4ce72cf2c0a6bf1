"""Great-circle distance helpers over plain latitude/longitude columns."""

import math
from typing import Tuple

EARTH_RADIUS_METERS = 6_371_000.0
METERS_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_METERS / 180.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two points given in degrees."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(
    lat: float, lon: float, distance: float
) -> Tuple[float, float, float, float]:
    """
    Box (min_lat, max_lat, min_lon, max_lon) containing every point within
    `distance` meters of (lat, lon).

    The box is only a pre-filter; callers refine with haversine_distance.
    Longitude falls back to the full range near the poles and when the box
    would wrap across the antimeridian.
    """
    dlat = distance / METERS_PER_DEGREE_LAT
    min_lat = max(-90.0, lat - dlat)
    max_lat = min(90.0, lat + dlat)

    if min_lat <= -90.0 or max_lat >= 90.0:
        return min_lat, max_lat, -180.0, 180.0

    # Widest longitude span occurs at the latitude edge nearest a pole
    widest_lat = max(abs(min_lat), abs(max_lat))
    cos_lat = math.cos(math.radians(widest_lat))
    if cos_lat <= 0:
        return min_lat, max_lat, -180.0, 180.0

    dlon = distance / (METERS_PER_DEGREE_LAT * cos_lat)
    min_lon = lon - dlon
    max_lon = lon + dlon
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, -180.0, 180.0

    return min_lat, max_lat, min_lon, max_lon
