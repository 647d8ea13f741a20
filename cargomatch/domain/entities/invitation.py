"""Domain entity for a cargo owner's invitation to a specific driver."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

INVITATION_STATUS_SENT = "sent"
INVITATION_STATUS_ACCEPTED = "accepted"
INVITATION_STATUS_DECLINED = "declined"
INVITATION_STATUS_EXPIRED = "expired"


@dataclass
class DriverInvitation:
    """Invitation asking a driver to apply for a job."""

    id: str | None
    job_id: str
    driver_id: str
    message: str
    status: str
    sent_at: datetime | None
    expires_at: datetime | None


__all__ = [
    "DriverInvitation",
    "INVITATION_STATUS_SENT",
    "INVITATION_STATUS_ACCEPTED",
    "INVITATION_STATUS_DECLINED",
    "INVITATION_STATUS_EXPIRED",
]
