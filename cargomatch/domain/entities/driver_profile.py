"""Domain entity describing a truck driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

DRIVER_STATUS_AVAILABLE = "available"
DRIVER_STATUS_BUSY = "busy"
DRIVER_STATUS_OFFLINE = "offline"

DRIVER_STATUSES = (DRIVER_STATUS_AVAILABLE, DRIVER_STATUS_BUSY, DRIVER_STATUS_OFFLINE)


@dataclass
class Vehicle:
    """Truck operated by a driver."""

    type: str | None = None
    capacity: float | None = None


@dataclass
class DriverProfile:
    """Profile and running statistics of a driver."""

    id: str | None
    name: str
    vehicle: Vehicle = field(default_factory=Vehicle)
    rating: float | None = None
    completed_jobs: int = 0
    total_earnings: float = 0.0
    current_location: str | None = None
    status: str = DRIVER_STATUS_OFFLINE
    price_per_distance_unit: float | None = None
    average_bid: float | None = None
    last_job_completed_at: datetime | None = None


__all__ = [
    "DriverProfile",
    "Vehicle",
    "DRIVER_STATUS_AVAILABLE",
    "DRIVER_STATUS_BUSY",
    "DRIVER_STATUS_OFFLINE",
    "DRIVER_STATUSES",
]
