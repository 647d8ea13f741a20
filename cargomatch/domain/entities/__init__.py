"""Domain entities exposed by the application."""

from .driver_profile import (
    DRIVER_STATUS_AVAILABLE,
    DRIVER_STATUS_BUSY,
    DRIVER_STATUS_OFFLINE,
    DRIVER_STATUSES,
    DriverProfile,
    Vehicle,
)
from .identity import UserIdentity
from .invitation import (
    INVITATION_STATUS_ACCEPTED,
    INVITATION_STATUS_DECLINED,
    INVITATION_STATUS_EXPIRED,
    INVITATION_STATUS_SENT,
    DriverInvitation,
)
from .job_application import (
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_COMPLETED,
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_REJECTED,
    APPLICATION_STATUSES,
    APPLICATION_TRANSITIONS,
    DEFAULT_DRIVER_NAME,
    DEFAULT_DRIVER_RATING,
    DEFAULT_VEHICLE_TYPE,
    DriverInfoSnapshot,
    JobApplication,
    JobInfoSnapshot,
)
from .job_posting import (
    CARGO_TYPES,
    JOB_STATUS_ASSIGNED,
    JOB_STATUS_CANCELLED,
    JOB_STATUS_DELIVERED,
    JOB_STATUS_IN_TRANSIT,
    JOB_STATUS_PENDING,
    JOB_STATUS_PICKED_UP,
    JOB_STATUSES,
    JOB_TRANSITIONS,
    URGENCY_EXPRESS,
    URGENCY_LEVELS,
    URGENCY_STANDARD,
    URGENCY_URGENT,
    JobPosting,
    Location,
    StatusHistoryEntry,
)
from .notification import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPE_DRIVER_INVITATION,
    NOTIFICATION_TYPE_JOB_ACCEPTED,
    NOTIFICATION_TYPE_JOB_APPLICATION,
    NOTIFICATION_TYPE_JOB_REJECTED,
    NOTIFICATION_TYPE_JOB_STATUS,
    NOTIFICATION_TYPE_MESSAGE,
    NOTIFICATION_TYPE_PAYMENT,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPE_VERIFICATION,
    NOTIFICATION_TYPES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_NORMAL,
    PRIORITY_URGENT,
    Notification,
)

__all__ = [
    "DriverProfile",
    "Vehicle",
    "DRIVER_STATUS_AVAILABLE",
    "DRIVER_STATUS_BUSY",
    "DRIVER_STATUS_OFFLINE",
    "DRIVER_STATUSES",
    "UserIdentity",
    "DriverInvitation",
    "INVITATION_STATUS_SENT",
    "INVITATION_STATUS_ACCEPTED",
    "INVITATION_STATUS_DECLINED",
    "INVITATION_STATUS_EXPIRED",
    "JobApplication",
    "JobInfoSnapshot",
    "DriverInfoSnapshot",
    "APPLICATION_STATUS_PENDING",
    "APPLICATION_STATUS_ACCEPTED",
    "APPLICATION_STATUS_REJECTED",
    "APPLICATION_STATUS_COMPLETED",
    "APPLICATION_STATUSES",
    "APPLICATION_TRANSITIONS",
    "DEFAULT_DRIVER_RATING",
    "DEFAULT_VEHICLE_TYPE",
    "DEFAULT_DRIVER_NAME",
    "JobPosting",
    "Location",
    "StatusHistoryEntry",
    "JOB_STATUS_PENDING",
    "JOB_STATUS_ASSIGNED",
    "JOB_STATUS_PICKED_UP",
    "JOB_STATUS_IN_TRANSIT",
    "JOB_STATUS_DELIVERED",
    "JOB_STATUS_CANCELLED",
    "JOB_STATUSES",
    "JOB_TRANSITIONS",
    "URGENCY_STANDARD",
    "URGENCY_URGENT",
    "URGENCY_EXPRESS",
    "URGENCY_LEVELS",
    "CARGO_TYPES",
    "Notification",
    "NOTIFICATION_TYPE_JOB_APPLICATION",
    "NOTIFICATION_TYPE_JOB_ACCEPTED",
    "NOTIFICATION_TYPE_JOB_REJECTED",
    "NOTIFICATION_TYPE_JOB_STATUS",
    "NOTIFICATION_TYPE_PAYMENT",
    "NOTIFICATION_TYPE_MESSAGE",
    "NOTIFICATION_TYPE_DRIVER_INVITATION",
    "NOTIFICATION_TYPE_SYSTEM",
    "NOTIFICATION_TYPE_VERIFICATION",
    "NOTIFICATION_TYPES",
    "PRIORITY_LOW",
    "PRIORITY_NORMAL",
    "PRIORITY_HIGH",
    "PRIORITY_URGENT",
    "NOTIFICATION_PRIORITIES",
]
