from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import LEAVE_TYPE_LABELS
from ..core.enums import LeaveType


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    year: int
    entitlements: dict[LeaveType, int]
    used: dict[LeaveType, int]

    def remaining(self, leave_type: LeaveType) -> int:
        return self.entitlements.get(leave_type, 0) - self.used.get(leave_type, 0)

    @property
    def total_entitled(self) -> int:
        return sum(self.entitlements.values())

    @property
    def total_used(self) -> int:
        return sum(self.used.get(t, 0) for t in self.entitlements)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "year": self.year,
            "types": [
                {
                    "type": t.value,
                    "label": LEAVE_TYPE_LABELS[t],
                    "entitled": self.entitlements[t],
                    "used": self.used.get(t, 0),
                    "remaining": self.remaining(t),
                }
                for t in self.entitlements
            ],
            "total_entitled": self.total_entitled,
            "total_used": self.total_used,
        }
