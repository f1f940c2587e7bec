"""Great-circle helpers for comparing activity start points."""

from __future__ import annotations

import math

from ..config import EARTH_RADIUS_M
from ..models import LatLon

__all__ = ["haversine_m", "distance_between"]


def haversine_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """Return the great-circle distance in metres between two points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push near-antipodal pairs just outside [0, 1].
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius_m * c


def distance_between(a: LatLon, b: LatLon, radius_m: float = EARTH_RADIUS_M) -> float:
    """Haversine distance between two ``(lat, lon)`` pairs."""

    return haversine_m(a[0], a[1], b[0], b[1], radius_m)
