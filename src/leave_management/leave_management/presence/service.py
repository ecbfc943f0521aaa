from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import DateLike, as_date, now_local, require_year
from ..core.enums import Role
from ..core.exceptions import PersistenceError, ValidationError
from ..leaves.model import LeaveRequest
from ..leaves.repository import LeaveRequestRepository
from ..realtime.feed import ChangeFeed
from ..realtime.live import LiveQuery
from ..users.repository import ProfileRepository
from .calculator import compute_presence, covering_request, index_by_employee
from .model import AbsentEmployee, PresenceSnapshot

logger = logging.getLogger(__name__)


class PresenceService:
    """Who is in and who is on approved leave, derived from leave requests."""

    def __init__(self, profiles: ProfileRepository, leaves: LeaveRequestRepository, feed: ChangeFeed):
        self._profiles = profiles
        self._leaves = leaves
        self._feed = feed

    def snapshot(self, on: Optional[DateLike] = None) -> PresenceSnapshot:
        day = as_date(on) if on is not None else now_local().date()

        # Without the employee list there is nothing to show: hard error.
        employees = self._profiles.list_by_role(Role.EMPLOYEE)

        warnings: list[str] = []
        try:
            approved: list[LeaveRequest] = list(self._leaves.list_approved_between(day, day))
        except PersistenceError as exc:
            logger.warning("presence: leave requests unavailable for %s: %s", day, exc)
            approved = []
            warnings.append("Impossible de charger les congés en cours")

        snap = compute_presence(day, employees, approved)
        return PresenceSnapshot(
            reference_date=snap.reference_date,
            present=snap.present,
            absent=snap.absent,
            warnings=warnings,
        )

    def calendar(self, year: int, month: int) -> dict[date, list[AbsentEmployee]]:
        """Absent employees for each day of a month (days without absences omitted)."""
        year = require_year(year)
        if not isinstance(month, int) or not 1 <= month <= 12:
            raise ValidationError("Mois invalide")
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])

        employees = {p.profile_id: p for p in self._profiles.list_by_role(Role.EMPLOYEE)}
        index = index_by_employee(self._leaves.list_approved_between(first, last))

        out: dict[date, list[AbsentEmployee]] = {}
        for offset in range((last - first).days + 1):
            day = first + timedelta(days=offset)
            absent: list[AbsentEmployee] = []
            for employee_id, requests in index.items():
                profile = employees.get(employee_id)
                leave = covering_request(requests, day) if profile else None
                if leave is None:
                    continue
                absent.append(
                    AbsentEmployee(
                        profile=profile,
                        request_id=leave.request_id,
                        leave_type=leave.leave_type,
                        start_date=leave.start_date,
                        end_date=leave.end_date,
                        days_remaining=(leave.end_date - day).days,
                    )
                )
            if absent:
                out[day] = sorted(absent, key=lambda a: a.profile.name)
        return out

    def watch(self, on: Optional[DateLike] = None) -> LiveQuery[PresenceSnapshot]:
        """Presence that refreshes whenever a leave request changes."""
        return LiveQuery(self._feed, "leave_requests", lambda: [self.snapshot(on)])
