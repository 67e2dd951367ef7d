from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional

import requests

from ..common.sse import SSEMessage, parse_sse
from ..core.enums import ErrorKind
from ..core.exceptions import (
    InvalidCoordinateError,
    InvalidInstantError,
    InvalidTokenError,
    NetworkFailureError,
    OutOfRangeError,
    StorageConflictError,
    ValidationError,
)
from ..geofence.model import Coordinate
from .context import ObserverContext

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"

_ERRORS_BY_KIND = {
    ErrorKind.INVALID_TOKEN.value: InvalidTokenError,
    ErrorKind.OUT_OF_RANGE.value: OutOfRangeError,
    ErrorKind.INVALID_COORDINATE.value: InvalidCoordinateError,
    ErrorKind.INVALID_INSTANT.value: InvalidInstantError,
    ErrorKind.STORAGE_CONFLICT.value: StorageConflictError,
    ErrorKind.VALIDATION.value: ValidationError,
}


class EventStream:
    """An open change stream; use as a context manager."""

    def __init__(self, response: requests.Response):
        self._response = response
        self._closed = False

    def __enter__(self) -> "EventStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def messages(self) -> Iterator[SSEMessage]:
        try:
            yield from parse_sse(self._response.iter_lines(decode_unicode=True))
        except requests.RequestException as exc:
            raise NetworkFailureError(f"Change stream interrupted: {exc}") from exc
        except (OSError, ValueError, AttributeError):
            # The socket goes away under iter_lines when close() runs on another thread.
            if not self._closed:
                raise
            logger.debug("change stream closed locally")

    def close(self) -> None:
        self._closed = True
        self._response.close()


class HubClient:
    """HTTP client for the hub attendance API."""

    def __init__(self, context: ObserverContext, *, session: Optional[requests.Session] = None):
        self._context = context
        self._session = session or requests.Session()
        if context.session_cookie:
            self._session.cookies.set(SESSION_COOKIE_NAME, context.session_cookie)

    @property
    def context(self) -> ObserverContext:
        return self._context

    def _get_json(self, path: str, *, params: Optional[dict] = None) -> Any:
        try:
            resp = self._session.get(self._context.url(path), params=params, timeout=self._context.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            raise NetworkFailureError(f"GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise NetworkFailureError(f"GET {path} returned invalid JSON") from exc

    def fetch_snapshot(self, day: Optional[str] = None) -> Any:
        params = {"day": day} if day else None
        return self._get_json("/api/attendance/snapshot", params=params)

    def fetch_roster(self, role: Optional[str] = None) -> List[dict]:
        params = {"role": role} if role else None
        body = self._get_json("/api/roster", params=params)
        return body if isinstance(body, list) else []

    def today_status(self) -> dict:
        return self._get_json("/api/attendance/status")

    def submit_scan(self, coordinate: Coordinate, decoded_token: str) -> dict:
        try:
            resp = self._session.post(
                self._context.url("/api/attendance/scan"),
                json={"coordinate": coordinate.to_dict(), "decodedToken": decoded_token},
                timeout=self._context.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkFailureError(f"Scan submission failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.ok:
            return body

        error_cls = _ERRORS_BY_KIND.get(body.get("error")) if isinstance(body, dict) else None
        message = body.get("message") if isinstance(body, dict) else None
        if error_cls is None:
            raise NetworkFailureError(message or f"Scan rejected with HTTP {resp.status_code}")
        if error_cls is OutOfRangeError:
            raise OutOfRangeError(message or "Out of range", distance_m=body.get("distanceM"))
        raise error_cls(message or error_cls.__name__)

    def open_event_stream(self) -> EventStream:
        try:
            resp = self._session.get(
                self._context.url("/api/attendance/stream"),
                stream=True,
                headers={"Accept": "text/event-stream"},
                timeout=(self._context.timeout, None),
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkFailureError(f"Could not open change stream: {exc}") from exc
        return EventStream(resp)
