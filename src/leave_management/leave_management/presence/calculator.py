from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import DateLike, as_date
from ..core.enums import LeaveStatus
from ..leaves.model import LeaveRequest
from ..users.model import Profile
from .model import AbsentEmployee, PresenceSnapshot


def index_by_employee(requests: Iterable[LeaveRequest]) -> dict[int, list[LeaveRequest]]:
    index: dict[int, list[LeaveRequest]] = defaultdict(list)
    for r in requests:
        index[r.employee_id].append(r)
    return index


def covering_request(candidates: Sequence[LeaveRequest], day: date) -> LeaveRequest | None:
    """Approved request covering ``day``; overlaps resolve to the earliest start."""
    covering = [r for r in candidates if r.status == LeaveStatus.APPROVED and r.covers(day)]
    if not covering:
        return None
    return min(covering, key=lambda r: (r.start_date, r.request_id))


def compute_presence(
    reference_date: DateLike,
    employees: Iterable[Profile],
    approved_requests: Iterable[LeaveRequest],
) -> PresenceSnapshot:
    """Partition ``employees`` into present/absent for one calendar day.

    Every employee lands in exactly one of the two lists, in input order.
    """
    day = as_date(reference_date)
    index = index_by_employee(approved_requests)

    present: list[Profile] = []
    absent: list[AbsentEmployee] = []
    for employee in employees:
        leave = covering_request(index.get(employee.profile_id, ()), day)
        if leave is None:
            present.append(employee)
            continue
        absent.append(
            AbsentEmployee(
                profile=employee,
                request_id=leave.request_id,
                leave_type=leave.leave_type,
                start_date=leave.start_date,
                end_date=leave.end_date,
                days_remaining=(leave.end_date - day).days,
            )
        )
    return PresenceSnapshot(reference_date=day, present=present, absent=absent)
