"""
Distance calculation using the Haversine formula.

Assumption
----------
Vehicles and delivery points are compared by great-circle (Haversine)
distance rather than road distance.  The dispatcher only needs a
consistent "which vehicle is nearer" signal, and the spherical model keeps
the engine free of any routing-service dependency.

Complexity: O(1) per call.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6_371.0

LATITUDE_BOUNDS = (-90.0, 90.0)
LONGITUDE_BOUNDS = (-180.0, 180.0)
_CENT = Decimal("0.01")


class InvalidCoordinate(ValueError):
    """Raised when a latitude or longitude falls outside its valid range."""

    def __init__(
        self, label: str, axis: str, value: float, bounds: tuple[float, float]
    ):
        self.label = label
        self.axis = axis
        self.value = value
        self.bounds = bounds
        super().__init__(
            f"{label} {axis} {value:.4f} is out of range "
            f"[{bounds[0]:g}, {bounds[1]:g}]"
        )


def validate_coordinates(lat: float, lon: float, label: str) -> None:
    """Raise ``InvalidCoordinate`` if *lat* / *lon* are out of range."""
    if not LATITUDE_BOUNDS[0] <= lat <= LATITUDE_BOUNDS[1]:
        err = InvalidCoordinate(label, "latitude", lat, LATITUDE_BOUNDS)
        logger.error(str(err))
        raise err
    if not LONGITUDE_BOUNDS[0] <= lon <= LONGITUDE_BOUNDS[1]:
        err = InvalidCoordinate(label, "longitude", lon, LONGITUDE_BOUNDS)
        logger.error(str(err))
        raise err


def haversine_km(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    validate_coordinates(lat1, lon1, "Starting point")
    validate_coordinates(lat2, lon2, "Ending point")

    lat1_r, lon1_r = math.radians(lat1), math.radians(lon1)
    lat2_r, lon2_r = math.radians(lat2), math.radians(lon2)
    dlat = lat2_r - lat1_r
    dlon = lon2_r - lon1_r

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_km(distance_km: float) -> str:
    """Render a distance as ``"17.85 km"``, rounding halves up on the shortest
    decimal form of the value (so ``1.005`` shows as ``"1.01 km"``)."""
    cents = Decimal(repr(distance_km)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return f"{cents} km"


def haversine_formatted(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> str:
    return format_km(haversine_km(lat1, lon1, lat2, lon2))


def haversine_m(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    return haversine_km(lat1, lon1, lat2, lon2) * 1000.0


def is_within_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    threshold_km: float,
) -> bool:
    """True if the two points are at most *threshold_km* apart."""
    return haversine_km(lat1, lon1, lat2, lon2) <= threshold_km
