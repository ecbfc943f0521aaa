from __future__ import annotations

from datetime import date

from src.leave_management.leave_management.core.enums import LeaveStatus
from src.leave_management.leave_management.leaves.model import LeaveFilter


def _seed(leaves_repo, employee, marketing_employee):
    leaves_repo.add(
        employee_id=marketing_employee.profile_id,
        leave_type="sick",
        start_date=date(2024, 6, 25),
        end_date=date(2024, 6, 27),
        status=LeaveStatus.APPROVED,
    )
    leaves_repo.add(
        employee_id=marketing_employee.profile_id,
        leave_type="annual",
        start_date=date(2024, 8, 5),
        end_date=date(2024, 8, 9),
    )
    leaves_repo.add(
        employee_id=employee.profile_id,
        leave_type="annual",
        start_date=date(2024, 7, 15),
        end_date=date(2024, 7, 26),
        status=LeaveStatus.APPROVED,
    )


def test_department_and_status_are_combined_with_and(container, leaves_repo, employee, marketing_employee):
    _seed(leaves_repo, employee, marketing_employee)

    rows = container.leave_service.list_requests(LeaveFilter(department="marketing", status=LeaveStatus.APPROVED))

    assert len(rows) == 1
    assert rows[0].employee_name == "Pierre Dubois"
    assert rows[0].status == LeaveStatus.APPROVED


def test_search_matches_name_or_department_case_insensitively(container, leaves_repo, employee, marketing_employee):
    _seed(leaves_repo, employee, marketing_employee)

    by_name = container.leave_service.list_requests(LeaveFilter(search="SOPHIE"))
    by_department = container.leave_service.list_requests(LeaveFilter(search="dévelop"))
    nothing = container.leave_service.list_requests(LeaveFilter(search="finance"))

    assert [v.employee_name for v in by_name] == ["Sophie Martin"]
    assert [v.employee_name for v in by_department] == ["Sophie Martin"]
    assert nothing == []


def test_empty_filter_returns_everything_newest_first(container, leaves_repo, employee, marketing_employee):
    _seed(leaves_repo, employee, marketing_employee)

    rows = container.leave_service.list_requests(LeaveFilter())

    assert [v.request_id for v in rows] == [3, 2, 1]
