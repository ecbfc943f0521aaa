from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import ChangeKind, NotificationType
from ..core.exceptions import PersistenceError
from ..database.mysql_base import MySQLRepository, db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

_COLUMNS = "notification_id, user_id, type, title, message, is_read, created_at"


def row_to_notification(r: dict) -> Notification:
    try:
        return Notification(
            notification_id=int(r["notification_id"]),
            user_id=int(r["user_id"]),
            type=NotificationType(r["type"]),
            title=str(r["title"]),
            message=str(r["message"]),
            read=bool(r["is_read"]),
            created_at=r["created_at"],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"Notification invalide: {r.get('notification_id')!r}") from exc


def _project_all(rows: list[dict]) -> list[Notification]:
    out: list[Notification] = []
    for r in rows:
        try:
            out.append(row_to_notification(r))
        except PersistenceError:
            logger.warning("skipping malformed notification row %r", r.get("notification_id"))
    return out


class MySQLNotificationRepository(MySQLRepository, NotificationRepository):
    table = "notifications"

    def create(self, *, user_id: int, type: NotificationType, title: str, message: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(user_id, type, title, message, is_read) VALUES(%s,%s,%s,%s,0)",
                (int(user_id), type.value, title, message),
            )
            notification_id = int(cur.lastrowid)
        self._publish(ChangeKind.INSERT, notification_id, int(user_id))
        return notification_id

    def get(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (int(notification_id),))
            row = fetchone(cur)
        return row_to_notification(row) if row else None

    def list_for_user(self, user_id: int, *, limit: Optional[int] = 200) -> Sequence[Notification]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM notifications
            WHERE user_id=%s
            ORDER BY created_at DESC, notification_id DESC
        """
        params: list[object] = [int(user_id)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
        return _project_all(rows)

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[Notification]:
        sql = f"SELECT {_COLUMNS} FROM notifications ORDER BY created_at DESC, notification_id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT %s"
            params = (int(limit),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
        return _project_all(rows)

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM notifications WHERE notification_id=%s", (int(notification_id),))
            row = fetchone(cur)
            if not row:
                return False
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND is_read=0",
                (int(notification_id),),
            )
            changed = cur.rowcount > 0
        if changed:
            self._publish(ChangeKind.UPDATE, int(notification_id), int(row["user_id"]))
        return True

    def mark_all_read(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0",
                (int(user_id),),
            )
            changed = int(cur.rowcount)
        if changed:
            self._publish(ChangeKind.UPDATE, None, int(user_id))
        return changed

    def delete(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM notifications WHERE notification_id=%s", (int(notification_id),))
            row = fetchone(cur)
            if not row:
                return False
            cur.execute("DELETE FROM notifications WHERE notification_id=%s", (int(notification_id),))
        self._publish(ChangeKind.DELETE, int(notification_id), int(row["user_id"]))
        return True
