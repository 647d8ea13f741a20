"""Persistence helpers for job application documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cargomatch.domain.entities import (
    DEFAULT_DRIVER_NAME,
    DEFAULT_DRIVER_RATING,
    DEFAULT_VEHICLE_TYPE,
    DriverInfoSnapshot,
    JobApplication,
    JobInfoSnapshot,
)
from cargomatch.infrastructure.document_store import DocumentStore, FieldFilter, where
from cargomatch.utils import parse_timestamp, to_timestamp_string

APPLICATIONS_COLLECTION = "job_applications"


class ApplicationRepository:
    """Provide read access and mapping helpers for :class:`JobApplication` objects.

    Writes that change the application lifecycle go through store transactions
    in the use cases; this repository only shapes documents.
    """

    collection = APPLICATIONS_COLLECTION

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, application_id: str) -> JobApplication | None:
        document = await self.store.get(APPLICATIONS_COLLECTION, application_id)
        return self.to_entity(document) if document else None

    async def list(
        self,
        *,
        job_id: str | None = None,
        driver_id: str | None = None,
        cargo_owner_id: str | None = None,
        statuses: tuple[str, ...] | None = None,
        order_field: str = "submitted_at",
        limit: int | None = None,
    ) -> list[JobApplication]:
        documents = await self.store.query(
            APPLICATIONS_COLLECTION,
            self.filters(
                job_id=job_id,
                driver_id=driver_id,
                cargo_owner_id=cargo_owner_id,
                statuses=statuses,
            ),
            [(order_field, "desc")],
            limit,
        )
        return [self.to_entity(document) for document in documents]

    @staticmethod
    def filters(
        *,
        job_id: str | None = None,
        driver_id: str | None = None,
        cargo_owner_id: str | None = None,
        statuses: tuple[str, ...] | None = None,
    ) -> list[FieldFilter]:
        filters: list[FieldFilter] = []
        if job_id is not None:
            filters.append(where("job_id", "==", job_id))
        if driver_id is not None:
            filters.append(where("driver_id", "==", driver_id))
        if cargo_owner_id is not None:
            filters.append(where("cargo_owner_id", "==", cargo_owner_id))
        if statuses:
            if len(statuses) == 1:
                filters.append(where("status", "==", statuses[0]))
            else:
                filters.append(where("status", "in", list(statuses)))
        return filters

    @staticmethod
    def to_document(application: JobApplication) -> dict[str, Any]:
        return {
            "job_id": application.job_id,
            "driver_id": application.driver_id,
            "cargo_owner_id": application.cargo_owner_id,
            "bid_amount": application.bid_amount,
            "message": application.message,
            "status": application.status,
            "submitted_at": to_timestamp_string(application.submitted_at),
            "decided_at": to_timestamp_string(application.decided_at),
            "rejection_reason": application.rejection_reason,
            "completed_at": to_timestamp_string(application.completed_at),
            "final_amount": application.final_amount,
            "owner_rating": application.owner_rating,
            "job_info": {
                "title": application.job_info.title,
                "pickup_location": application.job_info.pickup_location,
                "delivery_location": application.job_info.delivery_location,
                "budget": application.job_info.budget,
            },
            "driver_info": {
                "name": application.driver_info.name,
                "rating": application.driver_info.rating,
                "completed_jobs": application.driver_info.completed_jobs,
                "vehicle_type": application.driver_info.vehicle_type,
            },
        }

    @staticmethod
    def to_entity(document: Mapping[str, Any]) -> JobApplication:
        job_info = document.get("job_info") or {}
        driver_info = document.get("driver_info") or {}
        return JobApplication(
            id=document.get("id"),
            job_id=document.get("job_id", ""),
            driver_id=document.get("driver_id", ""),
            cargo_owner_id=document.get("cargo_owner_id", ""),
            bid_amount=float(document.get("bid_amount") or 0),
            message=document.get("message") or "",
            status=document.get("status") or "pending",
            submitted_at=parse_timestamp(document.get("submitted_at")),
            decided_at=parse_timestamp(document.get("decided_at")),
            rejection_reason=document.get("rejection_reason"),
            completed_at=parse_timestamp(document.get("completed_at")),
            final_amount=document.get("final_amount"),
            owner_rating=document.get("owner_rating"),
            job_info=JobInfoSnapshot(
                title=job_info.get("title") or "",
                pickup_location=job_info.get("pickup_location") or "",
                delivery_location=job_info.get("delivery_location") or "",
                budget=job_info.get("budget"),
            ),
            driver_info=DriverInfoSnapshot(
                name=driver_info.get("name") or DEFAULT_DRIVER_NAME,
                rating=float(
                    driver_info["rating"]
                    if driver_info.get("rating") is not None
                    else DEFAULT_DRIVER_RATING
                ),
                completed_jobs=int(driver_info.get("completed_jobs") or 0),
                vehicle_type=driver_info.get("vehicle_type") or DEFAULT_VEHICLE_TYPE,
            ),
        )


__all__ = ["ApplicationRepository", "APPLICATIONS_COLLECTION"]
