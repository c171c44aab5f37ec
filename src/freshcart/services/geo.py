"""Great-circle distance helpers."""

import math

from freshcart.domain.geo import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Compute the haversine distance between two coordinates in kilometres.

    The result is unrounded; radius comparisons must use it as-is and only
    display code should round it.
    """
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(
        d_lambda / 2
    ) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def round_distance(km: float) -> float:
    """Round a distance to one decimal place for display."""
    return round(km, 1)
