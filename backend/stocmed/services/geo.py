"""Great-circle distance between coordinates"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from stocmed.core.config import settings

_ONE_DECIMAL = Decimal("0.1")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometers between two points in decimal degrees.

    Rounded half-up to 0.1 km so repeated searches display the same value.
    Inputs must be finite; callers are expected to check with is_usable_coordinate.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push a just outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    distance = settings.EARTH_RADIUS_KM * c

    return float(Decimal(repr(distance)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def is_usable_coordinate(latitude: Optional[float], longitude: Optional[float]) -> bool:
    """Both parts present and finite."""
    if latitude is None or longitude is None:
        return False
    try:
        return math.isfinite(float(latitude)) and math.isfinite(float(longitude))
    except (TypeError, ValueError):
        return False
