from __future__ import annotations

import csv
import io

import pytest

from src.leave_management.leave_management.core.exceptions import AuthorizationError, ValidationError
from src.leave_management.leave_management.users.service import SessionUser


def test_employee_exports_only_their_leave_requests(container, leaves_repo, employee, marketing_employee, july_annual):
    from datetime import date

    leaves_repo.add(
        employee_id=marketing_employee.profile_id,
        leave_type="sick",
        start_date=date(2024, 6, 25),
        end_date=date(2024, 6, 27),
    )

    out = container.export_service.export("leave_requests", actor=SessionUser.from_profile(employee))

    assert out.filename == "demandes_conges.csv"
    assert out.row_count == 1
    rows = list(csv.DictReader(io.StringIO(out.content)))
    assert rows[0]["employee_name"] == "Sophie Martin"
    assert rows[0]["reason"] == "Vacances d'été en famille"
    assert rows[0]["duration"] == "12"


def test_profiles_export_is_admin_only(container, admin, employee):
    with pytest.raises(AuthorizationError):
        container.export_service.export("profiles", actor=SessionUser.from_profile(employee))

    out = container.export_service.export("profiles", actor=SessionUser.from_profile(admin))
    assert out.row_count == 2
    assert "password" not in out.content.splitlines()[0]


def test_empty_or_unknown_export_is_rejected(container, employee):
    actor = SessionUser.from_profile(employee)
    with pytest.raises(ValidationError):
        container.export_service.export("notifications", actor=actor)
    with pytest.raises(ValidationError):
        container.export_service.export("timesheets", actor=actor)


def test_admin_export_is_not_capped(container, leaves_repo, admin, employee):
    from datetime import date

    for day in range(1, 29):
        for _ in range(20):
            leaves_repo.add(
                employee_id=employee.profile_id,
                leave_type="annual",
                start_date=date(2024, 8, day),
                end_date=date(2024, 8, day),
            )

    out = container.export_service.export("leave_requests", actor=SessionUser.from_profile(admin))

    assert out.row_count == 560
    assert len(list(csv.DictReader(io.StringIO(out.content)))) == 560
