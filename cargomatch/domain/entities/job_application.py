"""Domain entity representing a driver's bid on a job posting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

APPLICATION_STATUS_PENDING = "pending"
APPLICATION_STATUS_ACCEPTED = "accepted"
APPLICATION_STATUS_REJECTED = "rejected"
APPLICATION_STATUS_COMPLETED = "completed"

APPLICATION_STATUSES = (
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_REJECTED,
    APPLICATION_STATUS_COMPLETED,
)

# Allowed transitions of the application lifecycle; rejected and completed
# are terminal.
APPLICATION_TRANSITIONS: dict[str, tuple[str, ...]] = {
    APPLICATION_STATUS_PENDING: (
        APPLICATION_STATUS_ACCEPTED,
        APPLICATION_STATUS_REJECTED,
    ),
    APPLICATION_STATUS_ACCEPTED: (APPLICATION_STATUS_COMPLETED,),
    APPLICATION_STATUS_REJECTED: (),
    APPLICATION_STATUS_COMPLETED: (),
}

DEFAULT_DRIVER_RATING = 4.5
DEFAULT_VEHICLE_TYPE = "Unknown"
DEFAULT_DRIVER_NAME = "Unknown driver"


@dataclass(frozen=True)
class JobInfoSnapshot:
    """Job fields copied into the application when it is submitted."""

    title: str
    pickup_location: str
    delivery_location: str
    budget: float | None


@dataclass(frozen=True)
class DriverInfoSnapshot:
    """Driver fields copied into the application when it is submitted."""

    name: str
    rating: float
    completed_jobs: int
    vehicle_type: str


@dataclass
class JobApplication:
    """Bid placed by a driver on a job posting."""

    id: str | None
    job_id: str
    driver_id: str
    cargo_owner_id: str
    bid_amount: float
    job_info: JobInfoSnapshot
    driver_info: DriverInfoSnapshot
    message: str = ""
    status: str = APPLICATION_STATUS_PENDING
    submitted_at: datetime | None = None
    decided_at: datetime | None = None
    rejection_reason: str | None = None
    completed_at: datetime | None = None
    final_amount: float | None = None
    owner_rating: float | None = None

    def can_transition_to(self, status: str) -> bool:
        """Return ``True`` when moving to ``status`` is a legal transition."""

        return status in APPLICATION_TRANSITIONS.get(self.status, ())


__all__ = [
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
]
