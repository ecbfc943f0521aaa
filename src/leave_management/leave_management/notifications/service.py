from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import NotificationType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..realtime.feed import ChangeFeed
from ..realtime.live import LiveQuery
from ..users.service import SessionUser
from .model import Notification
from .repository import NotificationRepository, Notifier

logger = logging.getLogger(__name__)


class NotificationService(Notifier):
    """Create, list, mark read and delete a user's notifications."""

    def __init__(self, notifications: NotificationRepository, feed: ChangeFeed):
        self._notifications = notifications
        self._feed = feed

    def create(self, *, user_id: int, type: NotificationType, title: str, message: str) -> Notification:
        try:
            ntype = NotificationType(type)
        except ValueError:
            raise ValidationError("Type de notification invalide")
        title = require_non_empty(title, "Titre")
        message = require_non_empty(message, "Message")

        notification_id = self._notifications.create(
            user_id=int(user_id),
            type=ntype,
            title=title,
            message=message,
        )
        logger.info("notification %s (%s) created for user %s", notification_id, ntype.value, user_id)
        created = self._notifications.get(notification_id)
        if created is None:
            raise NotFoundError("Notification introuvable après création")
        return created

    # Notifier contract
    def notify(self, *, user_id: int, type: NotificationType, title: str, message: str) -> Notification:
        return self.create(user_id=user_id, type=type, title=title, message=message)

    def list(self, *, user_id: int, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), limit=limit)

    def list_for_export(self, *, actor: SessionUser) -> Sequence[Notification]:
        if actor.role == Role.ADMIN:
            return self._notifications.list_all()
        return self._notifications.list_for_user(actor.user_id, limit=None)

    def unread_count(self, *, user_id: int) -> int:
        return sum(1 for n in self.list(user_id=user_id) if not n.read)

    def _require_owned(self, *, actor_id: int, notification_id: int) -> Notification:
        n = self._notifications.get(int(notification_id))
        if not n:
            raise NotFoundError("Notification introuvable")
        if n.user_id != int(actor_id):
            raise AuthorizationError("Cette notification ne vous appartient pas")
        return n

    def mark_read(self, *, actor_id: int, notification_id: int) -> None:
        """Idempotent: an already-read notification is left as is."""
        n = self._require_owned(actor_id=actor_id, notification_id=notification_id)
        if n.read:
            return
        if not self._notifications.mark_read(n.notification_id):
            raise NotFoundError("Notification introuvable")

    def mark_all_read(self, *, user_id: int) -> int:
        changed = self._notifications.mark_all_read(int(user_id))
        if changed:
            logger.info("marked %s notifications read for user %s", changed, user_id)
        return changed

    def delete(self, *, actor_id: int, notification_id: int) -> None:
        """Hard delete. A missing id is always reported as NotFoundError."""
        n = self._require_owned(actor_id=actor_id, notification_id=notification_id)
        if not self._notifications.delete(n.notification_id):
            raise NotFoundError("Notification introuvable")

    def watch(self, *, user_id: int) -> LiveQuery[Notification]:
        """Live, newest-first notification list for one user. Close it when done."""
        return LiveQuery(
            self._feed,
            "notifications",
            lambda: self.list(user_id=user_id),
            user_id=int(user_id),
        )
