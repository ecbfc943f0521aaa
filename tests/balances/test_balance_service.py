from __future__ import annotations

from datetime import date

from src.leave_management.leave_management.core.enums import LeaveStatus, LeaveType


def test_balance_counts_approved_days_inside_the_year(container, leaves_repo, employee):
    add = leaves_repo.add
    add(employee_id=employee.profile_id, leave_type="annual", start_date=date(2024, 7, 15), end_date=date(2024, 7, 26), status=LeaveStatus.APPROVED)
    add(employee_id=employee.profile_id, leave_type="annual", start_date=date(2024, 12, 30), end_date=date(2025, 1, 3), status=LeaveStatus.APPROVED)
    add(employee_id=employee.profile_id, leave_type="sick", start_date=date(2024, 3, 1), end_date=date(2024, 3, 2), status=LeaveStatus.APPROVED)
    add(employee_id=employee.profile_id, leave_type="personal", start_date=date(2024, 5, 1), end_date=date(2024, 5, 1))
    add(employee_id=employee.profile_id, leave_type="unpaid", start_date=date(2024, 9, 1), end_date=date(2024, 9, 5), status=LeaveStatus.APPROVED)

    balance = container.balance_service.balance_for(employee_id=employee.profile_id, year=2024)

    assert balance.used[LeaveType.ANNUAL] == 14
    assert balance.used[LeaveType.SICK] == 2
    assert balance.used[LeaveType.PERSONAL] == 0
    assert LeaveType.UNPAID not in balance.used
    assert balance.remaining(LeaveType.ANNUAL) == 11
    assert balance.total_entitled == 40
    assert balance.total_used == 16

    next_year = container.balance_service.balance_for(employee_id=employee.profile_id, year=2025)
    assert next_year.used[LeaveType.ANNUAL] == 3
