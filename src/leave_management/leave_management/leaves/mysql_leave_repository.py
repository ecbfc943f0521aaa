from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.enums import ChangeKind, LeaveStatus, LeaveType
from ..core.exceptions import PersistenceError
from ..database.mysql_base import MySQLRepository, db_cursor, fetchall, fetchone, in_clause, like_pattern
from ..notifications.model import NotificationDraft
from .model import LeaveRequest, LeaveRequestView
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)

_DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)

_COLUMNS = """
    r.request_id, r.user_id, r.type, r.start_date, r.end_date, r.reason,
    r.status, r.created_at, r.approved_by, r.comments, r.decided_at
"""


def row_to_leave(r: dict) -> LeaveRequest:
    """Typed projection of a ``leave_requests`` row; raises on malformed data."""
    try:
        start_date = r["start_date"]
        end_date = r["end_date"]
        if start_date is None or end_date is None or end_date < start_date:
            raise ValueError("invalid date range")
        approved_by = r.get("approved_by")
        return LeaveRequest(
            request_id=int(r["request_id"]),
            employee_id=int(r["user_id"]),
            leave_type=LeaveType(r["type"]),
            start_date=start_date,
            end_date=end_date,
            reason=r.get("reason"),
            status=LeaveStatus(r["status"]),
            created_at=r["created_at"],
            approver_id=int(approved_by) if approved_by is not None else None,
            admin_comment=r.get("comments"),
            decided_at=r.get("decided_at"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"Demande de congé invalide: {r.get('request_id')!r}") from exc


def row_to_view(r: dict) -> LeaveRequestView:
    if r.get("name") is None:
        raise PersistenceError(f"Demande de congé sans profil: {r.get('request_id')!r}")
    return LeaveRequestView(
        request=row_to_leave(r),
        employee_name=str(r["name"]),
        department=r.get("department") or "",
        position=r.get("position") or "",
    )


class MySQLLeaveRequestRepository(MySQLRepository, LeaveRequestRepository):
    table = "leave_requests"

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            request_id = int(cur.lastrowid)
        self._publish(ChangeKind.INSERT, request_id, int(employee_id))
        return request_id

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests r WHERE r.request_id=%s", (int(request_id),))
            row = fetchone(cur)
        return row_to_leave(row) if row else None

    def get_view(self, request_id: int) -> Optional[LeaveRequestView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, p.name, p.department, p.position
                FROM leave_requests r
                LEFT JOIN profiles p ON p.profile_id = r.user_id
                WHERE r.request_id=%s
                """,
                (int(request_id),),
            )
            row = fetchone(cur)
        return row_to_view(row) if row else None

    def list_views(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestView]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("r.user_id=%s")
            params.append(int(employee_id))
        if department and department.strip():
            clauses.append("LOWER(p.department)=%s")
            params.append(department.strip().lower())
        if search and search.strip():
            clauses.append("(LOWER(p.name) LIKE %s OR LOWER(p.department) LIKE %s)")
            pattern = like_pattern(search.strip())
            params.extend([pattern, pattern])

        sql = f"""
            SELECT {_COLUMNS}, p.name, p.department, p.position
            FROM leave_requests r
            LEFT JOIN profiles p ON p.profile_id = r.user_id
            WHERE {" AND ".join(clauses)}
            ORDER BY r.created_at DESC, r.request_id DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)

        out: list[LeaveRequestView] = []
        for r in rows:
            try:
                out.append(row_to_view(r))
            except PersistenceError:
                logger.warning("skipping malformed leave request row %r", r.get("request_id"))
        return out

    def count_by_status(self) -> dict[LeaveStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM leave_requests GROUP BY status")
            rows = fetchall(cur)

        counts: dict[LeaveStatus, int] = {}
        for r in rows:
            try:
                counts[LeaveStatus(r["status"])] = int(r["n"])
            except (KeyError, TypeError, ValueError):
                logger.warning("skipping unknown leave status %r in counts", r.get("status"))
        return counts

    def list_approved_between(
        self,
        start: date,
        end: date,
        *,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["r.status=%s", "r.start_date<=%s", "r.end_date>=%s"]
        params: list[object] = [LeaveStatus.APPROVED.value, end, start]
        if employee_id is not None:
            clauses.append("r.user_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests r
                WHERE {" AND ".join(clauses)}
                ORDER BY r.start_date, r.request_id
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        out: list[LeaveRequest] = []
        for r in rows:
            try:
                out.append(row_to_leave(r))
            except PersistenceError:
                logger.warning("skipping malformed leave request row %r", r.get("request_id"))
        return out

    def transition(
        self,
        *,
        request_id: int,
        expected: Sequence[LeaveStatus],
        new_status: LeaveStatus,
        approver_id: Optional[int] = None,
        admin_comment: Optional[str] = None,
        notification: Optional[NotificationDraft] = None,
    ) -> bool:
        expected_values = [s.value for s in expected]
        decided_sql = ", decided_at=NOW()" if new_status in _DECISIONS else ""
        notification_id = None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_requests
                SET status=%s,
                    approved_by=COALESCE(%s, approved_by),
                    comments=COALESCE(%s, comments){decided_sql}
                WHERE request_id=%s AND status IN ({in_clause(expected_values)})
                """,
                (
                    new_status.value,
                    approver_id,
                    admin_comment,
                    int(request_id),
                    *expected_values,
                ),
            )
            if cur.rowcount <= 0:
                return False

            cur.execute("SELECT user_id FROM leave_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            owner = int(row["user_id"]) if row else None

            if notification is not None:
                # Same transaction: a failed insert rolls the status change back.
                cur.execute(
                    "INSERT INTO notifications(user_id, type, title, message, is_read) VALUES(%s,%s,%s,%s,0)",
                    (int(notification.user_id), notification.type.value, notification.title, notification.message),
                )
                notification_id = int(cur.lastrowid)

        self._publish(ChangeKind.UPDATE, int(request_id), owner)
        if notification is not None:
            self._publish(ChangeKind.INSERT, notification_id, int(notification.user_id), table="notifications")
        return True

    def set_comment(self, request_id: int, comment: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM leave_requests WHERE request_id=%s",
                (int(request_id),),
            )
            row = fetchone(cur)
            if not row:
                return False
            cur.execute(
                "UPDATE leave_requests SET comments=%s WHERE request_id=%s",
                (comment, int(request_id)),
            )
        self._publish(ChangeKind.UPDATE, int(request_id), int(row["user_id"]))
        return True
