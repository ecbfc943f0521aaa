from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import DateLike, as_date, format_date_range
from ..common.validators import optional_text
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus, LeaveType, NotificationType, Role
from ..core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ..notifications.model import NotificationDraft
from ..notifications.repository import Notifier
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .model import LeaveFilter, LeaveRequest, LeaveRequestView
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class SubmissionObserver(Protocol):
    """Optional hook run after a request has been stored."""

    def on_submitted(self, request: LeaveRequest, employee: Profile) -> None:
        raise NotImplementedError


class AdminSubmissionNotifier(SubmissionObserver):
    """Raise a ``request`` notification to every admin when leave is submitted."""

    def __init__(self, profiles: ProfileRepository, notifier: Notifier):
        self._profiles = profiles
        self._notifier = notifier

    def on_submitted(self, request: LeaveRequest, employee: Profile) -> None:
        message = (
            f"{employee.name} a soumis une demande ({request.type_label}) "
            f"{format_date_range(request.start_date, request.end_date)}"
        )
        for admin in self._profiles.list_by_role(Role.ADMIN):
            self._notifier.notify(
                user_id=admin.profile_id,
                type=NotificationType.REQUEST,
                title="Nouvelle demande de congé",
                message=message,
            )


def decision_notification(
    request: LeaveRequest, status: LeaveStatus, comment: Optional[str] = None
) -> NotificationDraft:
    """Notification sent to the employee when a request is decided."""
    period = format_date_range(request.start_date, request.end_date)
    if status == LeaveStatus.APPROVED:
        title = "Demande approuvée"
        message = f"Votre demande ({request.type_label}) {period} a été approuvée."
    else:
        title = "Demande refusée"
        message = f"Votre demande ({request.type_label}) {period} a été refusée."
    if comment:
        message += f" Commentaire : {comment}"
    return NotificationDraft(
        user_id=request.employee_id,
        type=NotificationType.APPROVAL if status == LeaveStatus.APPROVED else NotificationType.REJECTION,
        title=title,
        message=message,
    )


class LeaveRequestService:
    """Leave request lifecycle: submit, decide, cancel, comment, list."""

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        profiles: ProfileRepository,
        *,
        observers: Sequence[SubmissionObserver] = (),
    ):
        self._leaves = leaves
        self._profiles = profiles
        self._observers = list(observers)

    @staticmethod
    def _parse_type(value) -> LeaveType:
        try:
            return LeaveType(value)
        except ValueError:
            raise ValidationError("Type de congé invalide")

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(int(request_id))
        if not req:
            raise NotFoundError("Demande de congé introuvable")
        return req

    def _require_admin(self, actor_id: int) -> Profile:
        actor = self._profiles.get_by_id(int(actor_id))
        if not actor or actor.role != Role.ADMIN:
            raise AuthorizationError("Seuls les administrateurs peuvent traiter les demandes")
        return actor

    def submit(
        self,
        *,
        employee_id: int,
        leave_type,
        start_date: DateLike,
        end_date: DateLike,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        ltype = self._parse_type(leave_type)
        start = as_date(start_date, "Date de début")
        end = as_date(end_date, "Date de fin")
        if end < start:
            raise ValidationError("La date de fin doit être postérieure ou égale à la date de début")

        employee = self._profiles.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employé inconnu")

        request_id = self._leaves.create(
            employee_id=employee.profile_id,
            leave_type=ltype,
            start_date=start,
            end_date=end,
            reason=optional_text(reason, "Motif"),
        )
        created = self._require_request(request_id)
        logger.info(
            "leave request %s submitted by %s (%s, %s days)",
            request_id,
            employee.profile_id,
            ltype.value,
            created.duration,
        )

        for observer in self._observers:
            try:
                observer.on_submitted(created, employee)
            except Exception:
                # Observers are optional side effects; the request is already stored.
                logger.exception("submission observer %r failed for request %s", observer, request_id)
        return created

    def _decide(
        self,
        *,
        request_id: int,
        approver_id: int,
        comment: Optional[str],
        new_status: LeaveStatus,
    ) -> LeaveRequest:
        approver = self._require_admin(approver_id)
        req = self._require_request(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidStateError("Cette demande a déjà été traitée")

        comment = optional_text(comment, "Commentaire")
        notification = decision_notification(req, new_status, comment)
        # Status change and notification commit together, or not at all.
        ok = self._leaves.transition(
            request_id=req.request_id,
            expected=(LeaveStatus.PENDING,),
            new_status=new_status,
            approver_id=approver.profile_id,
            admin_comment=comment,
            notification=notification,
        )
        if not ok:
            # Lost the race against another admin (or the request vanished).
            self._require_request(request_id)
            raise InvalidStateError("Cette demande a déjà été traitée")

        logger.info(
            "leave request %s %s by %s, %s notification sent to %s",
            request_id,
            new_status.value,
            approver.profile_id,
            notification.type.value,
            notification.user_id,
        )
        return self._require_request(request_id)

    def approve(self, *, request_id: int, approver_id: int, comment: Optional[str] = None) -> LeaveRequest:
        return self._decide(
            request_id=request_id,
            approver_id=approver_id,
            comment=comment,
            new_status=LeaveStatus.APPROVED,
        )

    def reject(self, *, request_id: int, approver_id: int, comment: Optional[str] = None) -> LeaveRequest:
        return self._decide(
            request_id=request_id,
            approver_id=approver_id,
            comment=comment,
            new_status=LeaveStatus.REJECTED,
        )

    def cancel(self, *, request_id: int, actor_id: int) -> LeaveRequest:
        actor = self._profiles.get_by_id(int(actor_id))
        if not actor:
            raise AuthorizationError("Utilisateur inconnu")
        req = self._require_request(request_id)
        if actor.role != Role.ADMIN and req.employee_id != actor.profile_id:
            raise AuthorizationError("Vous ne pouvez annuler que vos propres demandes")

        cancellable = (LeaveStatus.PENDING, LeaveStatus.APPROVED)
        if req.status not in cancellable:
            raise InvalidStateError("Cette demande ne peut plus être annulée")

        if not self._leaves.transition(
            request_id=req.request_id,
            expected=cancellable,
            new_status=LeaveStatus.CANCELLED,
        ):
            self._require_request(request_id)
            raise InvalidStateError("Cette demande ne peut plus être annulée")

        logger.info("leave request %s cancelled by %s", request_id, actor.profile_id)
        return self._require_request(request_id)

    def comment(self, *, request_id: int, admin_id: int, comment: Optional[str]) -> LeaveRequest:
        """Admin comment: the only edit allowed once a request is decided."""
        self._require_admin(admin_id)
        self._require_request(request_id)
        if not self._leaves.set_comment(int(request_id), optional_text(comment, "Commentaire")):
            raise NotFoundError("Demande de congé introuvable")
        return self._require_request(request_id)

    def get(self, request_id: int) -> LeaveRequestView:
        view = self._leaves.get_view(int(request_id))
        if not view:
            raise NotFoundError("Demande de congé introuvable")
        return view

    def list_for_employee(self, *, employee_id: int, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequestView]:
        return self._leaves.list_views(employee_id=int(employee_id), limit=limit)

    def list_requests(self, flt: LeaveFilter, *, limit: Optional[int] = None) -> Sequence[LeaveRequestView]:
        """Every request matching ``flt``, newest first (uncapped unless ``limit`` is given)."""
        return self._leaves.list_views(
            status=flt.status,
            employee_id=flt.employee_id,
            department=flt.department,
            search=flt.search,
            limit=limit,
        )

    def stats(self) -> dict[str, int]:
        counts = self._leaves.count_by_status()
        return {s.value: counts.get(s, 0) for s in LeaveStatus}
