from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .balances.service import BalanceService
from .core.enums import LeaveType
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.repository import LeaveRequestRepository
from .leaves.service import AdminSubmissionNotifier, LeaveRequestService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .presence.service import PresenceService
from .realtime.feed import ChangeFeed
from .reports.service import ExportService
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.repository import ProfileRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    feed: ChangeFeed

    profiles_repo: ProfileRepository
    leaves_repo: LeaveRequestRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    profile_service: ProfileService
    notification_service: NotificationService
    leave_service: LeaveRequestService
    presence_service: PresenceService
    balance_service: BalanceService
    export_service: ExportService


def build_services(
    *,
    profiles_repo: ProfileRepository,
    leaves_repo: LeaveRequestRepository,
    notifications_repo: NotificationRepository,
    feed: ChangeFeed,
    entitlements: Optional[Mapping[LeaveType, int]] = None,
    notify_admins_on_submit: bool = False,
) -> Container:
    """Wire services around any repository implementations (MySQL or in-memory)."""
    auth_service = AuthService(profiles_repo)
    profile_service = ProfileService(profiles_repo)
    notification_service = NotificationService(notifications_repo, feed)

    observers = []
    if notify_admins_on_submit:
        observers.append(AdminSubmissionNotifier(profiles_repo, notification_service))

    leave_service = LeaveRequestService(leaves_repo, profiles_repo, observers=observers)
    presence_service = PresenceService(profiles_repo, leaves_repo, feed)
    balance_service = BalanceService(leaves_repo, entitlements=entitlements)
    export_service = ExportService(leave_service, notification_service, profile_service)

    return Container(
        feed=feed,
        profiles_repo=profiles_repo,
        leaves_repo=leaves_repo,
        notifications_repo=notifications_repo,
        auth_service=auth_service,
        profile_service=profile_service,
        notification_service=notification_service,
        leave_service=leave_service,
        presence_service=presence_service,
        balance_service=balance_service,
        export_service=export_service,
    )


def build_container(
    *,
    db_config: dict,
    entitlements: Optional[Mapping[LeaveType, int]] = None,
    notify_admins_on_submit: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    feed = ChangeFeed()

    return build_services(
        profiles_repo=MySQLProfileRepository(conn, feed),
        leaves_repo=MySQLLeaveRequestRepository(conn, feed),
        notifications_repo=MySQLNotificationRepository(conn, feed),
        feed=feed,
        entitlements=entitlements,
        notify_admins_on_submit=notify_admins_on_submit,
    )
