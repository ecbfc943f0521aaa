from __future__ import annotations

import logging
from dataclasses import dataclass

from ..common.csv_export import to_csv
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..leaves.model import LeaveFilter
from ..leaves.service import LeaveRequestService
from ..notifications.service import NotificationService
from ..users.service import ProfileService, SessionUser

logger = logging.getLogger(__name__)

EXPORT_FILENAMES = {
    "leave_requests": "demandes_conges.csv",
    "notifications": "notifications.csv",
    "profiles": "profils_utilisateurs.csv",
}


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: str
    row_count: int


class ExportService:
    """CSV exports of leave requests, notifications and (admin only) profiles."""

    def __init__(self, leaves: LeaveRequestService, notifications: NotificationService, profiles: ProfileService):
        self._leaves = leaves
        self._notifications = notifications
        self._profiles = profiles

    def _rows(self, kind: str, actor: SessionUser) -> list[dict]:
        if kind == "leave_requests":
            flt = LeaveFilter() if actor.role == Role.ADMIN else LeaveFilter(employee_id=actor.user_id)
            return [v.to_dict() for v in self._leaves.list_requests(flt)]
        if kind == "notifications":
            return [n.to_dict() for n in self._notifications.list_for_export(actor=actor)]
        if kind == "profiles":
            if actor.role != Role.ADMIN:
                raise AuthorizationError("Seuls les administrateurs peuvent exporter les profils")
            return [p.public_dict() for p in self._profiles.list_all(actor=actor)]
        raise ValidationError("Type d'export inconnu")

    def export(self, kind: str, *, actor: SessionUser) -> ExportFile:
        rows = self._rows(kind, actor)
        if not rows:
            raise ValidationError("Aucune donnée à exporter pour cette sélection")
        logger.info("export %s: %s rows for user %s", kind, len(rows), actor.user_id)
        return ExportFile(filename=EXPORT_FILENAMES[kind], content=to_csv(rows), row_count=len(rows))
