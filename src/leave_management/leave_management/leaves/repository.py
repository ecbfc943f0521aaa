from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..notifications.model import NotificationDraft
from .model import LeaveRequest, LeaveRequestView


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_view(self, request_id: int) -> Optional[LeaveRequestView]:
        raise NotImplementedError

    def list_views(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestView]:
        """Newest first, joined with the employee profile.

        All predicates are applied by the store (department: case-insensitive
        equality, search: case-insensitive substring of name or department).
        ``limit=None`` returns every match.
        """

        raise NotImplementedError

    def count_by_status(self) -> dict[LeaveStatus, int]:
        raise NotImplementedError

    def list_approved_between(
        self,
        start: date,
        end: date,
        *,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Approved requests whose [start_date, end_date] overlaps [start, end]."""

        raise NotImplementedError

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
        """Conditional update: only applies while status is one of ``expected``.

        ``notification`` is stored in the same unit of work: either both the
        status change and the notification are committed, or neither is.
        ``decided_at`` is only stamped for approved/rejected.
        Returns False when no row matched (missing, or already moved on).
        """

        raise NotImplementedError

    def set_comment(self, request_id: int, comment: Optional[str]) -> bool:
        raise NotImplementedError
