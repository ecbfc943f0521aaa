"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveStatus, LeaveType

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10
DEFAULT_STREAM_KEEPALIVE_SECONDS = 15

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"

LEAVE_TYPE_LABELS = {
    LeaveType.ANNUAL: "Congés annuels",
    LeaveType.SICK: "Congé maladie",
    LeaveType.MATERNITY: "Congé maternité",
    LeaveType.PERSONAL: "Congé personnel",
    LeaveType.EMERGENCY: "Congé d'urgence",
    LeaveType.UNPAID: "Congé sans solde",
}

STATUS_LABELS = {
    LeaveStatus.PENDING: "En attente",
    LeaveStatus.APPROVED: "Approuvé",
    LeaveStatus.REJECTED: "Refusé",
    LeaveStatus.CANCELLED: "Annulé",
}

# Yearly entitlements (days) for the leave types that carry a balance.
DEFAULT_LEAVE_ENTITLEMENTS = {
    LeaveType.ANNUAL: 25,
    LeaveType.SICK: 10,
    LeaveType.PERSONAL: 5,
}
