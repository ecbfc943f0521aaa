from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import leave_duration
from ..core.constants import LEAVE_TYPE_LABELS, STATUS_LABELS
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime
    approver_id: Optional[int] = None
    admin_comment: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def duration(self) -> int:
        """Inclusive day count."""
        return leave_duration(self.start_date, self.end_date)

    @property
    def type_label(self) -> str:
        return LEAVE_TYPE_LABELS[self.leave_type]

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "user_id": self.employee_id,
            "type": self.leave_type.value,
            "type_label": self.type_label,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "duration": self.duration,
            "reason": self.reason or "",
            "status": self.status.value,
            "status_label": STATUS_LABELS[self.status],
            "approved_by": self.approver_id,
            "comments": self.admin_comment or "",
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "decided_at": self.decided_at.strftime("%Y-%m-%d %H:%M") if self.decided_at else None,
        }


@dataclass(frozen=True)
class LeaveRequestView:
    """A leave request joined with its employee's profile columns."""

    request: LeaveRequest
    employee_name: str
    department: str
    position: str

    @property
    def request_id(self) -> int:
        return self.request.request_id

    @property
    def status(self) -> LeaveStatus:
        return self.request.status

    def to_dict(self) -> dict:
        d = self.request.to_dict()
        d.update(
            {
                "employee_name": self.employee_name,
                "department": self.department,
                "position": self.position,
            }
        )
        return d


@dataclass(frozen=True)
class LeaveFilter:
    """Independent predicates combined with AND; None means "any"."""

    search: Optional[str] = None
    status: Optional[LeaveStatus] = None
    department: Optional[str] = None
    employee_id: Optional[int] = None

    def matches(self, view: LeaveRequestView) -> bool:
        if self.employee_id is not None and view.request.employee_id != int(self.employee_id):
            return False
        if self.status is not None and view.status != self.status:
            return False
        if self.department and view.department.casefold() != self.department.strip().casefold():
            return False
        if self.search:
            needle = self.search.strip().casefold()
            if needle and needle not in view.employee_name.casefold() and needle not in view.department.casefold():
                return False
        return True
