from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for profiles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        department: str,
        position: str,
        role: Role,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, profile_id: int, *, name: str, department: str, position: str) -> bool:
        raise NotImplementedError

    def set_avatar(self, profile_id: int, avatar_url: Optional[str]) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[Profile]:
        raise NotImplementedError
