from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Authorization tier: admins approve requests and see reports."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    MATERNITY = "maternity"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    UNPAID = "unpaid"


class LeaveStatus(str, Enum):
    """Lifecycle stage of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    REQUEST = "request"
    APPROVAL = "approval"
    REJECTION = "rejection"
    REMINDER = "reminder"


class ChangeKind(str, Enum):
    """Row-level change delivered by the change feed."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
