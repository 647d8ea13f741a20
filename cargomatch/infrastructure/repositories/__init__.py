"""Repository implementations for infrastructure layer."""

from .application_repository import APPLICATIONS_COLLECTION, ApplicationRepository
from .driver_repository import DRIVERS_COLLECTION, DriverRepository
from .invitation_repository import INVITATIONS_COLLECTION, InvitationRepository
from .job_repository import JOBS_COLLECTION, JobRepository
from .notification_repository import NOTIFICATIONS_COLLECTION, NotificationRepository

__all__ = [
    "ApplicationRepository",
    "DriverRepository",
    "InvitationRepository",
    "JobRepository",
    "NotificationRepository",
    "APPLICATIONS_COLLECTION",
    "DRIVERS_COLLECTION",
    "INVITATIONS_COLLECTION",
    "JOBS_COLLECTION",
    "NOTIFICATIONS_COLLECTION",
]
