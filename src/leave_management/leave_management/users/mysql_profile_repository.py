from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import ChangeKind, Role
from ..core.exceptions import PersistenceError
from ..database.mysql_base import MySQLRepository, db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

_COLUMNS = "profile_id, email, password_hash, name, department, position, role, avatar_url, created_at"


def row_to_profile(r: dict) -> Profile:
    """Typed projection of a ``profiles`` row; raises on malformed data."""
    try:
        return Profile(
            profile_id=int(r["profile_id"]),
            email=str(r["email"]),
            name=str(r["name"]),
            department=r.get("department") or "",
            position=r.get("position") or "",
            role=Role(r["role"]),
            password_hash=r.get("password_hash") or "",
            avatar_url=r.get("avatar_url"),
            created_at=r.get("created_at"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"Profil invalide: {r.get('profile_id')!r}") from exc


def _project_all(rows: list[dict]) -> list[Profile]:
    out: list[Profile] = []
    for r in rows:
        try:
            out.append(row_to_profile(r))
        except PersistenceError:
            logger.warning("skipping malformed profile row %r", r.get("profile_id"))
    return out


class MySQLProfileRepository(MySQLRepository, ProfileRepository):
    table = "profiles"

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE profile_id=%s", (int(profile_id),))
            row = fetchone(cur)
        return row_to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
        return row_to_profile(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(email, password_hash, name, department, position, role)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (email, password_hash, name, department, position, role.value),
            )
            profile_id = int(cur.lastrowid)
        self._publish(ChangeKind.INSERT, profile_id, profile_id)
        return profile_id

    def update_profile(self, profile_id: int, *, name: str, department: str, position: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET name=%s, department=%s, position=%s WHERE profile_id=%s",
                (name, department, position, int(profile_id)),
            )
            changed = cur.rowcount > 0
        if changed:
            self._publish(ChangeKind.UPDATE, int(profile_id), int(profile_id))
        return changed

    def set_avatar(self, profile_id: int, avatar_url: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET avatar_url=%s WHERE profile_id=%s",
                (avatar_url, int(profile_id)),
            )
            changed = cur.rowcount > 0
        if changed:
            self._publish(ChangeKind.UPDATE, int(profile_id), int(profile_id))
        return changed

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY created_at DESC")
            rows = fetchall(cur)
        return _project_all(rows)

    def list_by_role(self, role: Role) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE role=%s ORDER BY name", (role.value,))
            rows = fetchall(cur)
        return _project_all(rows)
