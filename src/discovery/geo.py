"""Distance collaborator: radius lookup of providers around a point.

In production the lookup is a database-side nearest-neighbour function. The
haversine implementation here answers the same question from the
coordinates already present on a provider snapshot.
"""

import logging
import math
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from src.core.schemas import DistanceHit, Provider

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088


@runtime_checkable
class DistanceLookup(Protocol):
    """Return providers within radius_km of (latitude, longitude), any order."""

    def __call__(self, latitude: float, longitude: float, radius_km: float) -> list[DistanceHit]:
        ...


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two points."""
    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2) - math.radians(lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


class HaversineDistanceLookup:
    """In-memory DistanceLookup over provider coordinates.

    Providers without both coordinates never match.
    """

    def __init__(self, providers: Iterable[Provider]) -> None:
        self._points = [
            (p.id, p.latitude, p.longitude)
            for p in providers
            if p.latitude is not None and p.longitude is not None
        ]

    def __call__(self, latitude: float, longitude: float, radius_km: float) -> list[DistanceHit]:
        hits: list[DistanceHit] = []
        for provider_id, lat, lon in self._points:
            distance = haversine_km(latitude, longitude, lat, lon)
            if distance <= radius_km:
                hits.append(DistanceHit(provider_id=provider_id, distance_km=distance))
        logger.debug(
            "HaversineDistanceLookup: %d/%d providers within %.1f km",
            len(hits), len(self._points), radius_km,
        )
        return hits
