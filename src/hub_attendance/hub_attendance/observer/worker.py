"""Observer runtime: one channel, one consumer.

The transport thread only pushes messages onto the channel; a single
reconciliation thread drains it and is the only code touching the merge
engine, so the merge policy is applied serially without locks.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, List, Optional

from ..client.api import HubClient
from ..core.constants import EVENT_ATTENDANCE_UPDATED
from ..core.exceptions import DomainError, NetworkFailureError
from .engine import ObserverMergeEngine
from .normalize import normalize_roster, unwrap_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotLoaded:
    rows: List[Any]
    roster: Optional[List[Any]] = None


@dataclass(frozen=True)
class SnapshotFailed:
    error: str


@dataclass(frozen=True)
class EventReceived:
    payload: Any


_STOP = object()


class ObserverWorker:
    def __init__(
        self,
        client: HubClient,
        engine: Optional[ObserverMergeEngine] = None,
        *,
        reconnect_delay: float = 2.0,
    ):
        self._client = client
        self._engine = engine or ObserverMergeEngine(client.context.days, clock=client.context.clock)
        self._reconnect_delay = float(reconnect_delay)
        self._channel: "queue.Queue[Any]" = queue.Queue()
        self._stopped = threading.Event()
        self._threads: List[threading.Thread] = []
        self._stream_lock = threading.Lock()
        self._stream: Optional[Any] = None
        self.last_error: Optional[str] = None
        self.connections = 0

    @property
    def engine(self) -> ObserverMergeEngine:
        return self._engine

    @property
    def channel(self) -> "queue.Queue[Any]":
        return self._channel

    def start(self) -> None:
        if self._threads:
            return
        self._stopped.clear()
        self._threads = [
            threading.Thread(target=self._reconcile_loop, name="observer-reconcile", daemon=True),
            threading.Thread(target=self._transport_loop, name="observer-transport", daemon=True),
        ]
        for t in self._threads:
            t.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stopped.set()
        # An idle stream never yields, so close it to unblock the transport thread.
        with self._stream_lock:
            stream = self._stream
        if stream is not None:
            stream.close()
        self._channel.put(_STOP)
        for t in self._threads:
            t.join(timeout)
        self._threads = []

    # -- producer side -------------------------------------------------

    def refresh_snapshot(self) -> None:
        """Fetch roster and today's records and queue them for reconciliation."""
        today = self._engine.today()
        try:
            roster = self._client.fetch_roster()
            rows = unwrap_rows(self._client.fetch_snapshot(today))
        except NetworkFailureError as exc:
            logger.warning("failed to load attendance snapshot: %s", exc)
            self._channel.put(SnapshotFailed(str(exc)))
            return
        self._channel.put(SnapshotLoaded(rows=rows, roster=roster))

    def connect_once(self) -> None:
        """Open the stream, then load a fresh snapshot, then forward events until it ends."""
        with self._client.open_event_stream() as stream:
            with self._stream_lock:
                self._stream = stream
            try:
                if self._stopped.is_set():
                    return
                self.connections += 1
                logger.info("observer connected (connection #%s)", self.connections)
                # Snapshot after the stream is open so nothing falls between the two.
                self.refresh_snapshot()
                for msg in stream.messages():
                    if self._stopped.is_set():
                        break
                    if msg.event != EVENT_ATTENDANCE_UPDATED:
                        continue
                    self._channel.put(EventReceived(msg.data))
            finally:
                with self._stream_lock:
                    self._stream = None

    def _transport_loop(self) -> None:
        while not self._stopped.is_set():
            try:
                self.connect_once()
            except NetworkFailureError as exc:
                if self._stopped.is_set():
                    logger.info("change stream closed on shutdown")
                    break
                self.last_error = str(exc)
                logger.warning("change stream unavailable: %s", exc)
            if self._stopped.wait(self._reconnect_delay):
                break
            logger.info("observer reconnecting")

    # -- consumer side -------------------------------------------------

    def process_pending(self) -> int:
        """Apply every queued message without blocking; returns how many were handled."""
        handled = 0
        while True:
            try:
                msg = self._channel.get_nowait()
            except queue.Empty:
                return handled
            if msg is _STOP:
                self._channel.put(_STOP)
                return handled
            self._handle(msg)
            handled += 1

    def _reconcile_loop(self) -> None:
        while True:
            msg = self._channel.get()
            if msg is _STOP:
                return
            self._handle(msg)

    def _handle(self, msg: Any) -> None:
        if isinstance(msg, SnapshotFailed):
            self.last_error = msg.error
            return

        if isinstance(msg, SnapshotLoaded):
            if msg.roster is not None:
                self._engine.set_roster(normalize_roster(msg.roster))
            entries = []
            for row in msg.rows:
                try:
                    entries.append(self._engine.normalize(row))
                except DomainError as exc:
                    logger.warning("skipped malformed snapshot row: %s", exc)
            self._engine.load_snapshot(entries)
            self.last_error = None
            return

        if isinstance(msg, EventReceived):
            payload = msg.payload
            try:
                if isinstance(payload, str):
                    payload = json.loads(payload)
                self._engine.apply_payload(payload)
            except (ValueError, DomainError) as exc:
                logger.warning("skipped malformed change event: %s", exc)
