"""Great-circle geometry between lat/lng coordinates.

Convention:
    - Coordinates are (lat, lng) tuples in decimal degrees
    - Distances are meters on a spherical Earth
    - Bearing 0 = North, clockwise in degrees, range [0, 360)
"""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0

Coordinate = tuple[float, float]


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates, in meters."""
    lat1, lng1 = a
    lat2, lng2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h just outside [0, 1] near equal or antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing from *a* to *b*, normalized to [0, 360)."""
    phi1 = math.radians(a[0])
    phi2 = math.radians(b[0])
    d_lambda = math.radians(b[1] - a[1])
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    bearing = math.degrees(math.atan2(y, x)) % 360.0
    # -1e-15 % 360 rounds to 360.0 in floating point
    return 0.0 if bearing >= 360.0 else bearing
