from __future__ import annotations

import math

from ..core.constants import DEFAULT_HUB_LAT, DEFAULT_HUB_LNG, DEFAULT_HUB_RADIUS_M, EARTH_RADIUS_M
from .model import Coordinate


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two points."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


class GeofenceValidator:
    """Circular fence around the hub, boundary inclusive."""

    def __init__(self, hub: Coordinate | None = None, radius_m: float = DEFAULT_HUB_RADIUS_M):
        if radius_m < 0:
            raise ValueError("radius_m must be >= 0")
        self._hub = hub or Coordinate(DEFAULT_HUB_LAT, DEFAULT_HUB_LNG)
        self._radius_m = float(radius_m)

    @property
    def hub(self) -> Coordinate:
        return self._hub

    @property
    def radius_m(self) -> float:
        return self._radius_m

    def distance_m(self, lat: float, lng: float) -> float:
        return haversine_m(Coordinate(lat, lng), self._hub)

    def is_within_hub(self, lat: float, lng: float) -> bool:
        return self.distance_m(lat, lng) <= self._radius_m
