from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    read: bool
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "user_id": self.user_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class NotificationDraft:
    """A notification not yet stored; written in the same unit of work as its trigger."""

    user_id: int
    type: NotificationType
    title: str
    message: str
