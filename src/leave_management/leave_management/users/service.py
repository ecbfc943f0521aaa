from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    department: str
    position: str

    @classmethod
    def from_profile(cls, profile: Profile) -> "SessionUser":
        return cls(
            user_id=profile.profile_id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            department=profile.department,
            position=profile.position,
        )


class AuthService:
    """Use case: sign up, sign in, resolve the current user."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        name: str,
        department: str = "",
        position: str = "",
        role: Role = Role.EMPLOYEE,
    ) -> SessionUser:
        email = require_email(email)
        name = require_non_empty(name, "Nom")
        require_min_length(password, "Mot de passe", 6)

        if self._profiles.get_by_email(email):
            raise ValidationError("Un compte existe déjà avec cet email")

        profile_id = self._profiles.create_profile(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            department=optional_text(department, "Service") or "",
            position=optional_text(position, "Poste") or "",
            role=Role(role),
        )
        logger.info("profile %s registered (role=%s)", profile_id, Role(role).value)
        return self.current_user(profile_id)

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Email ou mot de passe incorrect")
        profile = self._profiles.get_by_email(email.strip().lower())
        if not profile:
            raise AuthenticationError("Email ou mot de passe incorrect")

        try:
            ok = check_password_hash(profile.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' from seed data
            ok = False

        if not ok:
            raise AuthenticationError("Email ou mot de passe incorrect")

        return SessionUser.from_profile(profile)

    def current_user(self, profile_id: int) -> SessionUser:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise AuthenticationError("Session expirée")
        return SessionUser.from_profile(profile)


class ProfileService:
    """Use case: read and edit profiles (owner or admin)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def _require_editable(self, actor: SessionUser, profile_id: int) -> Profile:
        if actor.role != Role.ADMIN and actor.user_id != int(profile_id):
            raise AuthorizationError("Vous ne pouvez modifier que votre propre profil")
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise NotFoundError("Profil introuvable")
        return profile

    def get(self, profile_id: int) -> Profile:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise NotFoundError("Profil introuvable")
        return profile

    def update_profile(
        self,
        *,
        actor: SessionUser,
        profile_id: int,
        name: Optional[str] = None,
        department: Optional[str] = None,
        position: Optional[str] = None,
    ) -> Profile:
        current = self._require_editable(actor, profile_id)

        new_name = require_non_empty(name, "Nom") if name is not None else current.name
        new_department = current.department
        if department is not None:
            new_department = optional_text(department, "Service") or ""
        new_position = current.position
        if position is not None:
            new_position = optional_text(position, "Poste") or ""

        self._profiles.update_profile(
            int(profile_id),
            name=new_name,
            department=new_department,
            position=new_position,
        )
        return self.get(profile_id)

    def set_avatar(self, *, actor: SessionUser, profile_id: int, avatar_url: Optional[str]) -> Profile:
        """Store the avatar reference; the file itself lives in object storage."""
        self._require_editable(actor, profile_id)
        self._profiles.set_avatar(int(profile_id), optional_text(avatar_url, "Avatar"))
        return self.get(profile_id)

    def list_employees(self) -> Sequence[Profile]:
        return self._profiles.list_by_role(Role.EMPLOYEE)

    def list_all(self, *, actor: SessionUser) -> Sequence[Profile]:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Accès réservé aux administrateurs")
        return self._profiles.list_all()
