from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from ..core.enums import LeaveType
from ..users.model import Profile


@dataclass(frozen=True)
class AbsentEmployee:
    profile: Profile
    request_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days_remaining: int

    def to_dict(self) -> dict:
        d = self.profile.public_dict()
        d.update(
            {
                "request_id": self.request_id,
                "leave_type": self.leave_type.value,
                "start_date": self.start_date.isoformat(),
                "end_date": self.end_date.isoformat(),
                "days_remaining": self.days_remaining,
            }
        )
        return d


@dataclass(frozen=True)
class PresenceSnapshot:
    """Derived attendance for one day; recomputed on demand, never stored."""

    reference_date: date
    present: list[Profile]
    absent: list[AbsentEmployee]
    warnings: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.present) + len(self.absent)

    def returning_soon(self) -> list[AbsentEmployee]:
        """Absences that end on the reference day or the day after."""
        horizon = self.reference_date + timedelta(days=1)
        return [a for a in self.absent if a.end_date <= horizon]

    def to_dict(self) -> dict:
        return {
            "date": self.reference_date.isoformat(),
            "present": [p.public_dict() for p in self.present],
            "absent": [a.to_dict() for a in self.absent],
            "returning_soon": [a.profile.profile_id for a in self.returning_soon()],
            "counts": {"total": self.total, "present": len(self.present), "absent": len(self.absent)},
            "warnings": list(self.warnings),
        }
