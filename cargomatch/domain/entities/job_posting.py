"""Domain entity representing a cargo shipment that seeks a driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

JOB_STATUS_PENDING = "pending"
JOB_STATUS_ASSIGNED = "assigned"
JOB_STATUS_PICKED_UP = "picked_up"
JOB_STATUS_IN_TRANSIT = "in_transit"
JOB_STATUS_DELIVERED = "delivered"
JOB_STATUS_CANCELLED = "cancelled"

JOB_STATUSES = (
    JOB_STATUS_PENDING,
    JOB_STATUS_ASSIGNED,
    JOB_STATUS_PICKED_UP,
    JOB_STATUS_IN_TRANSIT,
    JOB_STATUS_DELIVERED,
    JOB_STATUS_CANCELLED,
)

# Forward-only shipment progress; delivered and cancelled are terminal.
JOB_TRANSITIONS: dict[str, tuple[str, ...]] = {
    JOB_STATUS_PENDING: (JOB_STATUS_ASSIGNED, JOB_STATUS_CANCELLED),
    JOB_STATUS_ASSIGNED: (JOB_STATUS_PICKED_UP, JOB_STATUS_CANCELLED),
    JOB_STATUS_PICKED_UP: (JOB_STATUS_IN_TRANSIT,),
    JOB_STATUS_IN_TRANSIT: (JOB_STATUS_DELIVERED,),
    JOB_STATUS_DELIVERED: (),
    JOB_STATUS_CANCELLED: (),
}

URGENCY_STANDARD = "standard"
URGENCY_URGENT = "urgent"
URGENCY_EXPRESS = "express"

URGENCY_LEVELS = (URGENCY_STANDARD, URGENCY_URGENT, URGENCY_EXPRESS)

CARGO_TYPES = (
    "general",
    "food",
    "electronics",
    "clothing",
    "furniture",
    "automotive",
    "construction",
    "chemicals",
    "pharmaceuticals",
    "agriculture",
    "machinery",
    "documents",
    "fragile",
    "hazardous",
    "refrigerated",
    "oversized",
)


@dataclass
class Location:
    """Pickup or delivery point of a shipment."""

    address: str
    city: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def label(self) -> str:
        """Human readable single-line form used for matching and display."""

        parts = [self.address, self.city, self.country]
        seen: list[str] = []
        for part in parts:
            text = (part or "").strip()
            if text and text.lower() not in (item.lower() for item in seen):
                seen.append(text)
        return ", ".join(seen)


@dataclass
class StatusHistoryEntry:
    """Single entry of the append-only job status log."""

    status: str
    timestamp: datetime | None
    note: str = ""


@dataclass
class JobPosting:
    """Shipment request owned by a cargo owner."""

    id: str | None
    owner_id: str
    title: str
    pickup: Location
    delivery: Location
    description: str = ""
    cargo_type: str = "general"
    weight: float | None = None
    value: float | None = None
    budget: float | None = None
    required_vehicle_type: str | None = None
    urgency: str = URGENCY_STANDARD
    status: str = JOB_STATUS_PENDING
    application_count: int = 0
    estimated_distance: float | None = None
    assigned_application_id: str | None = None
    completed_application_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    assigned_at: datetime | None = None
    delivered_at: datetime | None = None
    status_history: list[StatusHistoryEntry] = field(default_factory=list)

    def can_transition_to(self, status: str) -> bool:
        return status in JOB_TRANSITIONS.get(self.status, ())


__all__ = [
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
]
