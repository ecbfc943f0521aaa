"""In-process change feed.

Repositories publish one ChangeEvent per committed write; observers subscribe
per table (optionally narrowed to one owning user) and either receive a
callback per event or pull events from a buffered queue. Subscriptions are
context managers and must be closed when the observer goes away.
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Optional

from ..common.datetime_utils import now_local
from ..core.enums import ChangeKind

logger = logging.getLogger(__name__)

ChangeCallback = Callable[["ChangeEvent"], None]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: ChangeKind
    row_id: Optional[int]
    user_id: Optional[int] = None
    occurred_at: datetime = field(default_factory=now_local)


class Subscription:
    def __init__(
        self,
        feed: "ChangeFeed",
        table: str,
        *,
        user_id: Optional[int] = None,
        callback: Optional[ChangeCallback] = None,
    ):
        self._feed = feed
        self.table = table
        self.user_id = user_id
        self._callback = callback
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        return self.user_id is None or event.user_id == self.user_id

    def deliver(self, event: ChangeEvent) -> None:
        if self.closed:
            return
        if self._callback is None:
            self._queue.put(event)
            return
        try:
            self._callback(event)
        except Exception:
            # Fire-and-forget: one broken observer must not fail the writer.
            logger.exception("change feed callback failed for table=%s", self.table)

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next buffered event, or None when the timeout elapses."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def events(self, timeout: float = 1.0) -> Iterator[Optional[ChangeEvent]]:
        """Yield buffered events until closed; yields None on each idle timeout."""
        while not self.closed:
            yield self.get(timeout=timeout)

    def close(self) -> None:
        if self.closed:
            return
        self._closed.set()
        self._feed.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ChangeFeed:
    """Thread-safe publish/subscribe broker keyed by table name."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        table: str,
        *,
        user_id: Optional[int] = None,
        callback: Optional[ChangeCallback] = None,
    ) -> Subscription:
        sub = Subscription(self, table, user_id=user_id, callback=callback)
        with self._lock:
            self._subscriptions.append(sub)
        logger.debug("subscribed to %s (user_id=%s)", table, user_id)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
        logger.debug("unsubscribed from %s (user_id=%s)", sub.table, sub.user_id)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(event)]
        for sub in targets:
            sub.deliver(event)

    def subscriber_count(self, table: Optional[str] = None) -> int:
        with self._lock:
            if table is None:
                return len(self._subscriptions)
            return sum(1 for s in self._subscriptions if s.table == table)
