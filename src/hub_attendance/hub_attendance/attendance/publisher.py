"""Fan-out of ledger changes to connected observers.

Each observer owns a bounded channel. Publishing never blocks the scan
request: when an observer's channel is full the event is dropped for that
observer only, and it catches up through its next snapshot.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Iterator, Optional

from ..core.constants import DEFAULT_SUBSCRIBER_QUEUE_SIZE, STREAM_KEEPALIVE_SECONDS
from .events import ChangeEvent

logger = logging.getLogger(__name__)


class Subscription:
    def __init__(self, subscription_id: int, maxsize: int):
        self.subscription_id = subscription_id
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def offer(self, event: ChangeEvent) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self.dropped += 1
            return False
        return True

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next event, or None when ``timeout`` elapses first."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def iter_events(self, *, keepalive: float = STREAM_KEEPALIVE_SECONDS) -> Iterator[Optional[ChangeEvent]]:
        """Yield events as they arrive; yields None on each idle keepalive tick."""
        while not self.closed:
            yield self.get(timeout=keepalive)

    def close(self) -> None:
        self._closed.set()


class ChangeBroadcaster:
    def __init__(self, *, queue_size: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE):
        self._queue_size = int(queue_size)
        self._lock = threading.Lock()
        self._subscribers: dict[int, Subscription] = {}
        self._ids = itertools.count(1)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        sub = Subscription(next(self._ids), self._queue_size)
        with self._lock:
            self._subscribers[sub.subscription_id] = sub
        logger.info("observer %s connected (total=%s)", sub.subscription_id, self.subscriber_count)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.close()
        with self._lock:
            self._subscribers.pop(sub.subscription_id, None)
        logger.info("observer %s disconnected", sub.subscription_id)

    def publish(self, event: ChangeEvent) -> int:
        """Offer ``event`` to every observer; returns how many accepted it."""
        with self._lock:
            targets = list(self._subscribers.values())

        delivered = 0
        for sub in targets:
            if sub.offer(event):
                delivered += 1
            else:
                logger.warning(
                    "dropped event for record %s on observer %s (channel full)",
                    event.record_id,
                    sub.subscription_id,
                )
        return delivered
