from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ..core.exceptions import PersistenceError
from .feed import ChangeEvent, ChangeFeed, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveQuery(Generic[T]):
    """Keep a query result fresh by re-fetching it on every change event.

    Events only signal that something changed; the authoritative list is
    always re-read, so out-of-order or duplicated events are harmless.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        table: str,
        fetch: Callable[[], Sequence[T]],
        *,
        user_id: Optional[int] = None,
    ):
        self._fetch = fetch
        self._lock = threading.Lock()
        self._current: Sequence[T] = []
        self._issued = 0
        self._applied = 0
        self.last_error: Optional[PersistenceError] = None
        # Subscribe before the first fetch so no committed write falls in between.
        self._subscription: Subscription = feed.subscribe(table, user_id=user_id, callback=self._on_change)
        try:
            self.refresh()
        except Exception:
            self._subscription.close()
            raise

    @property
    def current(self) -> Sequence[T]:
        with self._lock:
            return self._current

    def refresh(self) -> Sequence[T]:
        """Re-fetch; a result older than one already applied is dropped."""
        with self._lock:
            self._issued += 1
            ticket = self._issued
        try:
            rows = self._fetch()
        except PersistenceError as exc:
            # Keep the last good snapshot; the next event retries.
            logger.warning("live query refresh failed: %s", exc)
            with self._lock:
                if ticket > self._applied:
                    self.last_error = exc
                return self._current
        with self._lock:
            if ticket > self._applied:
                self._current = rows
                self._applied = ticket
                self.last_error = None
            return self._current

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("change on %s (%s), refreshing", event.table, event.kind.value)
        self.refresh()

    def close(self) -> None:
        self._subscription.close()

    @property
    def closed(self) -> bool:
        return self._subscription.closed

    def __enter__(self) -> "LiveQuery[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
