from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.leave_management.leave_management.container import build_services
from src.leave_management.leave_management.core.enums import ChangeKind, LeaveStatus, LeaveType, NotificationType, Role
from src.leave_management.leave_management.core.exceptions import PersistenceError
from src.leave_management.leave_management.leaves.model import LeaveFilter, LeaveRequest, LeaveRequestView
from src.leave_management.leave_management.notifications.model import Notification
from src.leave_management.leave_management.realtime.feed import ChangeEvent, ChangeFeed
from src.leave_management.leave_management.users.model import Profile

BASE_TIME = datetime(2024, 6, 20, 9, 0, 0)


class _Clock:
    def __init__(self):
        self._n = 0

    def tick(self) -> datetime:
        self._n += 1
        return BASE_TIME + timedelta(minutes=self._n)


class InMemoryProfiles:
    def __init__(self, feed: Optional[ChangeFeed] = None):
        self._rows: dict[int, Profile] = {}
        self._next_id = 1
        self._feed = feed
        self._clock = _Clock()

    def add(self, *, name, email, role=Role.EMPLOYEE, department="", position="", password_hash="") -> Profile:
        pid = self.create_profile(
            email=email,
            password_hash=password_hash,
            name=name,
            department=department,
            position=position,
            role=role,
        )
        return self._rows[pid]

    def get_by_id(self, profile_id):
        return self._rows.get(int(profile_id))

    def get_by_email(self, email):
        for p in self._rows.values():
            if p.email == email:
                return p
        return None

    def create_profile(self, *, email, password_hash, name, department, position, role):
        pid = self._next_id
        self._next_id += 1
        self._rows[pid] = Profile(
            profile_id=pid,
            email=email,
            name=name,
            department=department,
            position=position,
            role=Role(role),
            password_hash=password_hash,
            created_at=self._clock.tick(),
        )
        return pid

    def update_profile(self, profile_id, *, name, department, position):
        p = self._rows.get(int(profile_id))
        if not p:
            return False
        self._rows[p.profile_id] = replace(p, name=name, department=department, position=position)
        return True

    def set_avatar(self, profile_id, avatar_url):
        p = self._rows.get(int(profile_id))
        if not p:
            return False
        self._rows[p.profile_id] = replace(p, avatar_url=avatar_url)
        return True

    def list_all(self):
        return sorted(self._rows.values(), key=lambda p: p.created_at, reverse=True)

    def list_by_role(self, role):
        return sorted((p for p in self._rows.values() if p.role == role), key=lambda p: p.name)


class InMemoryLeaves:
    def __init__(self, profiles: InMemoryProfiles, notifications: "InMemoryNotifications", feed: Optional[ChangeFeed] = None):
        self._profiles = profiles
        self._notifications = notifications
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 1
        self._feed = feed
        self._clock = _Clock()
        self.fail_reads = False
        self.transition_calls = 0

    def _publish(self, kind, row_id, user_id):
        if self._feed is not None:
            self._feed.publish(ChangeEvent(table="leave_requests", kind=kind, row_id=row_id, user_id=user_id))

    def add(self, *, employee_id, leave_type, start_date, end_date, status=LeaveStatus.PENDING, reason=None):
        rid = self.create(
            employee_id=employee_id,
            leave_type=LeaveType(leave_type),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        if status != LeaveStatus.PENDING:
            self._rows[rid] = replace(self._rows[rid], status=status)
        return self._rows[rid]

    def create(self, *, employee_id, leave_type, start_date, end_date, reason):
        rid = self._next_id
        self._next_id += 1
        self._rows[rid] = LeaveRequest(
            request_id=rid,
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=self._clock.tick(),
        )
        self._publish(ChangeKind.INSERT, rid, int(employee_id))
        return rid

    def get(self, request_id):
        return self._rows.get(int(request_id))

    def _view(self, r: LeaveRequest) -> LeaveRequestView:
        p = self._profiles.get_by_id(r.employee_id)
        return LeaveRequestView(request=r, employee_name=p.name, department=p.department, position=p.position)

    def get_view(self, request_id):
        r = self._rows.get(int(request_id))
        return self._view(r) if r else None

    def list_views(self, *, status=None, employee_id=None, department=None, search=None, limit=None):
        if self.fail_reads:
            raise PersistenceError("store down")
        flt = LeaveFilter(search=search, status=status, department=department, employee_id=employee_id)
        rows = sorted(self._rows.values(), key=lambda r: (r.created_at, r.request_id), reverse=True)
        views = [v for v in (self._view(r) for r in rows) if flt.matches(v)]
        return views if limit is None else views[:limit]

    def count_by_status(self):
        counts = {}
        for r in self._rows.values():
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    def list_approved_between(self, start, end, *, employee_id=None):
        if self.fail_reads:
            raise PersistenceError("store down")
        rows = [
            r
            for r in self._rows.values()
            if r.status == LeaveStatus.APPROVED
            and r.start_date <= end
            and r.end_date >= start
            and (employee_id is None or r.employee_id == int(employee_id))
        ]
        return sorted(rows, key=lambda r: (r.start_date, r.request_id))

    def transition(self, *, request_id, expected, new_status, approver_id=None, admin_comment=None, notification=None):
        self.transition_calls += 1
        r = self._rows.get(int(request_id))
        if not r or r.status not in tuple(expected):
            return False
        decided = new_status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED)
        updated = replace(
            r,
            status=new_status,
            approver_id=approver_id if approver_id is not None else r.approver_id,
            admin_comment=admin_comment if admin_comment is not None else r.admin_comment,
            decided_at=self._clock.tick() if decided else r.decided_at,
        )
        if notification is not None:
            # Raises before the status change is stored, like a rolled-back transaction.
            self._notifications.create(
                user_id=notification.user_id,
                type=notification.type,
                title=notification.title,
                message=notification.message,
            )
        self._rows[r.request_id] = updated
        self._publish(ChangeKind.UPDATE, r.request_id, r.employee_id)
        return True

    def set_comment(self, request_id, comment):
        r = self._rows.get(int(request_id))
        if not r:
            return False
        self._rows[r.request_id] = replace(r, admin_comment=comment)
        self._publish(ChangeKind.UPDATE, r.request_id, r.employee_id)
        return True


class InMemoryNotifications:
    def __init__(self, feed: Optional[ChangeFeed] = None):
        self._rows: dict[int, Notification] = {}
        self._next_id = 1
        self._feed = feed
        self._clock = _Clock()
        self.fail_writes = False

    def _publish(self, kind, row_id, user_id):
        if self._feed is not None:
            self._feed.publish(ChangeEvent(table="notifications", kind=kind, row_id=row_id, user_id=user_id))

    def create(self, *, user_id, type, title, message):
        if self.fail_writes:
            raise PersistenceError("store down")
        nid = self._next_id
        self._next_id += 1
        self._rows[nid] = Notification(
            notification_id=nid,
            user_id=int(user_id),
            type=NotificationType(type),
            title=title,
            message=message,
            read=False,
            created_at=self._clock.tick(),
        )
        self._publish(ChangeKind.INSERT, nid, int(user_id))
        return nid

    def get(self, notification_id):
        return self._rows.get(int(notification_id))

    def list_for_user(self, user_id, *, limit=200):
        rows = [n for n in self._rows.values() if n.user_id == int(user_id)]
        rows.sort(key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return rows if limit is None else rows[:limit]

    def list_all(self, *, limit=None):
        rows = sorted(self._rows.values(), key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return rows if limit is None else rows[:limit]

    def mark_read(self, notification_id):
        n = self._rows.get(int(notification_id))
        if not n:
            return False
        if not n.read:
            self._rows[n.notification_id] = replace(n, read=True)
            self._publish(ChangeKind.UPDATE, n.notification_id, n.user_id)
        return True

    def mark_all_read(self, user_id):
        changed = 0
        for n in list(self._rows.values()):
            if n.user_id == int(user_id) and not n.read:
                self._rows[n.notification_id] = replace(n, read=True)
                changed += 1
        if changed:
            self._publish(ChangeKind.UPDATE, None, int(user_id))
        return changed

    def delete(self, notification_id):
        n = self._rows.pop(int(notification_id), None)
        if not n:
            return False
        self._publish(ChangeKind.DELETE, n.notification_id, n.user_id)
        return True


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 26, 8, 30, 0)


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def profiles_repo(feed):
    return InMemoryProfiles(feed)


@pytest.fixture
def leaves_repo(profiles_repo, notifications_repo, feed):
    return InMemoryLeaves(profiles_repo, notifications_repo, feed)


@pytest.fixture
def notifications_repo(feed):
    return InMemoryNotifications(feed)


@pytest.fixture
def container(profiles_repo, leaves_repo, notifications_repo, feed):
    return build_services(
        profiles_repo=profiles_repo,
        leaves_repo=leaves_repo,
        notifications_repo=notifications_repo,
        feed=feed,
    )


@pytest.fixture
def admin(profiles_repo):
    return profiles_repo.add(
        name="Marie Lefebvre",
        email="marie.lefebvre@entreprise.fr",
        role=Role.ADMIN,
        department="RH",
        position="Responsable RH",
    )


@pytest.fixture
def employee(profiles_repo):
    return profiles_repo.add(
        name="Sophie Martin",
        email="sophie.martin@entreprise.fr",
        department="Développement",
        position="Développeuse Senior",
    )


@pytest.fixture
def marketing_employee(profiles_repo):
    return profiles_repo.add(
        name="Pierre Dubois",
        email="pierre.dubois@entreprise.fr",
        department="Marketing",
        position="Chef de Projet",
    )


@pytest.fixture
def july_annual(leaves_repo, employee):
    """Pending annual leave 2024-07-15..2024-07-26 for ``employee``."""
    return leaves_repo.add(
        employee_id=employee.profile_id,
        leave_type=LeaveType.ANNUAL,
        start_date=date(2024, 7, 15),
        end_date=date(2024, 7, 26),
        reason="Vacances d'été en famille",
    )
