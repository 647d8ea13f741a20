"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_JOB_APPLICATION = "job_application"
NOTIFICATION_TYPE_JOB_ACCEPTED = "job_accepted"
NOTIFICATION_TYPE_JOB_REJECTED = "job_rejected"
NOTIFICATION_TYPE_JOB_STATUS = "job_status"
NOTIFICATION_TYPE_PAYMENT = "payment"
NOTIFICATION_TYPE_MESSAGE = "message"
NOTIFICATION_TYPE_DRIVER_INVITATION = "driver_invitation"
NOTIFICATION_TYPE_SYSTEM = "system"
NOTIFICATION_TYPE_VERIFICATION = "verification"

NOTIFICATION_TYPES = (
    NOTIFICATION_TYPE_JOB_APPLICATION,
    NOTIFICATION_TYPE_JOB_ACCEPTED,
    NOTIFICATION_TYPE_JOB_REJECTED,
    NOTIFICATION_TYPE_JOB_STATUS,
    NOTIFICATION_TYPE_PAYMENT,
    NOTIFICATION_TYPE_MESSAGE,
    NOTIFICATION_TYPE_DRIVER_INVITATION,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPE_VERIFICATION,
)

PRIORITY_LOW = "low"
PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

NOTIFICATION_PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str | None
    recipient_id: str
    title: str
    body: str
    type: str
    data: dict[str, Any] = field(default_factory=dict)
    priority: str = PRIORITY_NORMAL
    read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None


__all__ = [
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
