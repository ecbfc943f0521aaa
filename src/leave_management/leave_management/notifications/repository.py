from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: int, type: NotificationType, title: str, message: str) -> int:
        raise NotImplementedError

    def get(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: Optional[int] = 200) -> Sequence[Notification]:
        """Newest first; ``limit=None`` returns all of them."""

        raise NotImplementedError

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[Notification]:
        """Newest first; ``limit=None`` returns every notification."""

        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        """True when the notification exists (already read counts)."""

        raise NotImplementedError

    def mark_all_read(self, user_id: int) -> int:
        """Return how many unread notifications were flipped."""

        raise NotImplementedError

    def delete(self, notification_id: int) -> bool:
        raise NotImplementedError


class Notifier(Protocol):
    """Notification trigger used by the leave lifecycle."""

    def notify(self, *, user_id: int, type: NotificationType, title: str, message: str) -> Notification:
        raise NotImplementedError
