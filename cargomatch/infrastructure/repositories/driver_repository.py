"""Persistence helpers for driver profile documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cargomatch.domain.entities import DriverProfile, Vehicle
from cargomatch.domain.errors import PersistenceError
from cargomatch.infrastructure.document_store import DocumentStore, where
from cargomatch.utils import parse_timestamp, to_timestamp_string

DRIVERS_COLLECTION = "drivers"


class DriverRepository:
    """Provide CRUD operations for :class:`DriverProfile` objects."""

    collection = DRIVERS_COLLECTION

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, driver_id: str) -> DriverProfile | None:
        document = await self.store.get(DRIVERS_COLLECTION, driver_id)
        return self.to_entity(document) if document else None

    async def create(self, driver: DriverProfile) -> DriverProfile:
        driver_id = await self.store.create(
            DRIVERS_COLLECTION, self.to_document(driver), document_id=driver.id
        )
        created = await self.get(driver_id)
        if created is None:  # pragma: no cover - the document was just written
            raise PersistenceError(f"Driver {driver_id} vanished after creation")
        return created

    async def list(self, *, status: str | None = None) -> list[DriverProfile]:
        filters = [where("status", "==", status)] if status is not None else []
        documents = await self.store.query(DRIVERS_COLLECTION, filters)
        return [self.to_entity(document) for document in documents]

    @staticmethod
    def to_document(driver: DriverProfile) -> dict[str, Any]:
        return {
            "name": driver.name,
            "vehicle": {"type": driver.vehicle.type, "capacity": driver.vehicle.capacity},
            "rating": driver.rating,
            "completed_jobs": driver.completed_jobs,
            "total_earnings": driver.total_earnings,
            "current_location": driver.current_location,
            "status": driver.status,
            "price_per_distance_unit": driver.price_per_distance_unit,
            "average_bid": driver.average_bid,
            "last_job_completed_at": to_timestamp_string(driver.last_job_completed_at),
        }

    @staticmethod
    def to_entity(document: Mapping[str, Any]) -> DriverProfile:
        vehicle = document.get("vehicle") or {}
        return DriverProfile(
            id=document.get("id"),
            name=document.get("name") or "",
            vehicle=Vehicle(type=vehicle.get("type"), capacity=vehicle.get("capacity")),
            rating=document.get("rating"),
            completed_jobs=int(document.get("completed_jobs") or 0),
            total_earnings=float(document.get("total_earnings") or 0),
            current_location=document.get("current_location"),
            status=document.get("status") or "offline",
            price_per_distance_unit=document.get("price_per_distance_unit"),
            average_bid=document.get("average_bid"),
            last_job_completed_at=parse_timestamp(document.get("last_job_completed_at")),
        )


__all__ = ["DriverRepository", "DRIVERS_COLLECTION"]
