from __future__ import annotations

import logging
from typing import Callable, Optional

from ..core.exceptions import InvalidCoordinateError, InvalidTokenError, OutOfRangeError
from ..geofence.model import Coordinate
from ..geofence.validator import GeofenceValidator
from .api import HubClient

logger = logging.getLogger(__name__)

LocationProvider = Callable[[], Optional[Coordinate]]


class ScanSession:
    """Scanning-side session: one cached location, local pre-checks, then submit.

    The location is read once per session (best effort) and reused for
    every scan attempt. The server repeats both checks.
    """

    def __init__(
        self,
        client: HubClient,
        location_provider: LocationProvider,
        *,
        geofence: Optional[GeofenceValidator] = None,
        expected_token: Optional[str] = None,
    ):
        self._client = client
        self._location_provider = location_provider
        self._geofence = geofence
        self._expected_token = expected_token
        self._location: Optional[Coordinate] = None
        self._location_read = False

    @property
    def location(self) -> Optional[Coordinate]:
        if not self._location_read:
            self._location_read = True
            self._location = self._location_provider()
            if self._location is None:
                logger.warning("location unavailable for this session")
        return self._location

    def scan(self, decoded: str) -> dict:
        location = self.location
        if location is None:
            raise InvalidCoordinateError("Location is required to mark attendance")

        if self._expected_token is not None and decoded != self._expected_token:
            raise InvalidTokenError("Invalid QR code")

        if self._geofence is not None and not self._geofence.is_within_hub(location.lat, location.lng):
            raise OutOfRangeError(
                "You are too far from the hub location",
                distance_m=self._geofence.distance_m(location.lat, location.lng),
            )

        return self._client.submit_scan(location, decoded)
