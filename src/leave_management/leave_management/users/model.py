from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: an employee or admin account.

    Note: Plain data object (no DB access code).
    """

    profile_id: int
    email: str
    name: str
    department: str
    position: str
    role: Role
    password_hash: str = ""
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def public_dict(self) -> dict:
        return {
            "id": self.profile_id,
            "email": self.email,
            "name": self.name,
            "department": self.department,
            "position": self.position,
            "role": self.role.value,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
        }
