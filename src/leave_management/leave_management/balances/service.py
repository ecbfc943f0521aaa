from __future__ import annotations

from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import leave_duration, require_year
from ..core.constants import DEFAULT_LEAVE_ENTITLEMENTS
from ..core.enums import LeaveType
from ..leaves.repository import LeaveRequestRepository
from .model import LeaveBalance


class BalanceService:
    """Yearly entitlement vs. approved leave taken, per tracked leave type."""

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        *,
        entitlements: Optional[Mapping[LeaveType, int]] = None,
    ):
        self._leaves = leaves
        self._entitlements = dict(entitlements or DEFAULT_LEAVE_ENTITLEMENTS)

    def balance_for(self, *, employee_id: int, year: int) -> LeaveBalance:
        year = require_year(year)
        first = date(year, 1, 1)
        last = date(year, 12, 31)

        used = {t: 0 for t in self._entitlements}
        for r in self._leaves.list_approved_between(first, last, employee_id=int(employee_id)):
            if r.leave_type not in used:
                continue
            # Requests spanning New Year only count their days inside the year.
            used[r.leave_type] += leave_duration(max(r.start_date, first), min(r.end_date, last))

        return LeaveBalance(
            employee_id=int(employee_id),
            year=year,
            entitlements=dict(self._entitlements),
            used=used,
        )
