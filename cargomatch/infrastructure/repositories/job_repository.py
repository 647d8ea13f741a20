"""Persistence helpers for job posting documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from cargomatch.domain.entities import JobPosting, Location, StatusHistoryEntry
from cargomatch.domain.errors import PersistenceError
from cargomatch.infrastructure.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    FieldFilter,
    where,
)
from cargomatch.utils import parse_timestamp, to_timestamp_string

JOBS_COLLECTION = "jobs"


class JobRepository:
    """Provide CRUD operations for :class:`JobPosting` objects."""

    collection = JOBS_COLLECTION

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, job_id: str) -> JobPosting | None:
        document = await self.store.get(JOBS_COLLECTION, job_id)
        return self.to_entity(document) if document else None

    async def get_many(self, job_ids: Sequence[str]) -> dict[str, JobPosting]:
        unique_ids = list(dict.fromkeys(job_id for job_id in job_ids if job_id))
        if not unique_ids:
            return {}
        documents = await self.store.query(
            JOBS_COLLECTION, [where("id", "in", unique_ids)]
        )
        return {document["id"]: self.to_entity(document) for document in documents}

    async def create(self, job: JobPosting) -> JobPosting:
        document = self.to_document(job)
        document["created_at"] = job.created_at or SERVER_TIMESTAMP
        document["updated_at"] = job.updated_at or SERVER_TIMESTAMP
        job_id = await self.store.create(JOBS_COLLECTION, document, document_id=job.id)
        created = await self.get(job_id)
        if created is None:  # pragma: no cover - the document was just written
            raise PersistenceError(f"Job {job_id} vanished after creation")
        return created

    async def list(
        self,
        *,
        owner_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[JobPosting]:
        filters = self.filters(owner_id=owner_id, status=status)
        documents = await self.store.query(
            JOBS_COLLECTION, filters, [("created_at", "desc")], limit
        )
        return [self.to_entity(document) for document in documents]

    @staticmethod
    def filters(*, owner_id: str | None = None, status: str | None = None) -> list[FieldFilter]:
        filters: list[FieldFilter] = []
        if owner_id is not None:
            filters.append(where("owner_id", "==", owner_id))
        if status is not None:
            filters.append(where("status", "==", status))
        return filters

    @staticmethod
    def history_to_document(entries: Sequence[StatusHistoryEntry]) -> list[dict[str, Any]]:
        return [
            {
                "status": entry.status,
                "timestamp": to_timestamp_string(entry.timestamp),
                "note": entry.note,
            }
            for entry in entries
        ]

    @staticmethod
    def to_document(job: JobPosting) -> dict[str, Any]:
        return {
            "owner_id": job.owner_id,
            "title": job.title,
            "description": job.description,
            "cargo_type": job.cargo_type,
            "weight": job.weight,
            "value": job.value,
            "pickup": _location_to_document(job.pickup),
            "delivery": _location_to_document(job.delivery),
            "budget": job.budget,
            "required_vehicle_type": job.required_vehicle_type,
            "urgency": job.urgency,
            "status": job.status,
            "application_count": job.application_count,
            "estimated_distance": job.estimated_distance,
            "assigned_application_id": job.assigned_application_id,
            "completed_application_id": job.completed_application_id,
            "created_at": to_timestamp_string(job.created_at),
            "updated_at": to_timestamp_string(job.updated_at),
            "assigned_at": to_timestamp_string(job.assigned_at),
            "delivered_at": to_timestamp_string(job.delivered_at),
            "status_history": JobRepository.history_to_document(job.status_history),
        }

    @staticmethod
    def to_entity(document: Mapping[str, Any]) -> JobPosting:
        return JobPosting(
            id=document.get("id"),
            owner_id=document.get("owner_id", ""),
            title=document.get("title") or "",
            description=document.get("description") or "",
            cargo_type=document.get("cargo_type") or "general",
            weight=document.get("weight"),
            value=document.get("value"),
            pickup=_location_to_entity(document.get("pickup")),
            delivery=_location_to_entity(document.get("delivery")),
            budget=document.get("budget"),
            required_vehicle_type=document.get("required_vehicle_type"),
            urgency=document.get("urgency") or "standard",
            status=document.get("status") or "pending",
            application_count=int(document.get("application_count") or 0),
            estimated_distance=document.get("estimated_distance"),
            assigned_application_id=document.get("assigned_application_id"),
            completed_application_id=document.get("completed_application_id"),
            created_at=parse_timestamp(document.get("created_at")),
            updated_at=parse_timestamp(document.get("updated_at")),
            assigned_at=parse_timestamp(document.get("assigned_at")),
            delivered_at=parse_timestamp(document.get("delivered_at")),
            status_history=[
                StatusHistoryEntry(
                    status=entry.get("status", ""),
                    timestamp=parse_timestamp(entry.get("timestamp")),
                    note=entry.get("note") or "",
                )
                for entry in document.get("status_history") or []
                if isinstance(entry, Mapping)
            ],
        )


def _location_to_document(location: Location) -> dict[str, Any]:
    return {
        "address": location.address,
        "city": location.city,
        "country": location.country,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "label": location.label,
    }


def _location_to_entity(value: Any) -> Location:
    if isinstance(value, str):
        return Location(address=value)
    if not isinstance(value, Mapping):
        return Location(address="")
    return Location(
        address=value.get("address") or "",
        city=value.get("city"),
        country=value.get("country"),
        latitude=value.get("latitude"),
        longitude=value.get("longitude"),
    )


__all__ = ["JobRepository", "JOBS_COLLECTION"]
