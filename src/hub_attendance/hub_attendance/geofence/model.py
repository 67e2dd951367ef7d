from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..common.validators import require_finite_float
from ..core.exceptions import InvalidCoordinateError


@dataclass(frozen=True)
class Coordinate:
    """WGS84 point reported by a scanning device."""

    lat: float
    lng: float

    def __post_init__(self):
        lat = require_finite_float(self.lat, "lat")
        lng = require_finite_float(self.lng, "lng")
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinateError(f"Latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise InvalidCoordinateError(f"Longitude out of range: {lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    @classmethod
    def from_mapping(cls, data: Any) -> "Coordinate":
        if not isinstance(data, Mapping):
            raise InvalidCoordinateError("coordinate must be an object with lat/lng")
        lat = data.get("lat", data.get("latitude"))
        lng = data.get("lng", data.get("longitude"))
        if lat is None or lng is None:
            raise InvalidCoordinateError("coordinate requires lat and lng")
        return cls(lat=lat, lng=lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}
