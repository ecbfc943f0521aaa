from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _require_text(value, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} doit être un texte")
    return value


def require_non_empty(value: Optional[str], field_name: str) -> str:
    value = _require_text(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} est obligatoire")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    value = _require_text(value, field_name)
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} : {min_len} caractères minimum")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email invalide")
    return email


def optional_text(value: Optional[str], field_name: str = "Texte") -> Optional[str]:
    """Strip free text; blank input becomes None."""
    return (_require_text(value, field_name) or "").strip() or None


def parse_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} invalide")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} invalide")
