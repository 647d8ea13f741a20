"""Use case for submitting a bid on a job posting."""

from __future__ import annotations

import logging
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_PENDING,
    DEFAULT_DRIVER_NAME,
    DEFAULT_DRIVER_RATING,
    DEFAULT_VEHICLE_TYPE,
    DriverInfoSnapshot,
    DriverProfile,
    JobApplication,
    JobInfoSnapshot,
    JobPosting,
)
from cargomatch.domain.errors import ConflictError, NotFoundError
from cargomatch.infrastructure.document_store import Transaction
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    DRIVERS_COLLECTION,
    JOBS_COLLECTION,
    ApplicationRepository,
    DriverRepository,
    JobRepository,
)

from ..notifications import dispatch_safely, notify_new_job_application
from .validators import ensure_identifier, ensure_valid_bid

logger = logging.getLogger(__name__)

# Applications that still block a second bid from the same driver.
_OPEN_STATUSES = (APPLICATION_STATUS_PENDING, APPLICATION_STATUS_ACCEPTED)


def build_job_snapshot(job: JobPosting) -> JobInfoSnapshot:
    return JobInfoSnapshot(
        title=job.title,
        pickup_location=job.pickup.label,
        delivery_location=job.delivery.label,
        budget=job.budget,
    )


def build_driver_snapshot(driver: DriverProfile | None) -> DriverInfoSnapshot:
    """Copy the driver fields shown to the cargo owner, filling in defaults."""

    if driver is None:
        return DriverInfoSnapshot(
            name=DEFAULT_DRIVER_NAME,
            rating=DEFAULT_DRIVER_RATING,
            completed_jobs=0,
            vehicle_type=DEFAULT_VEHICLE_TYPE,
        )
    return DriverInfoSnapshot(
        name=driver.name or DEFAULT_DRIVER_NAME,
        rating=driver.rating if driver.rating is not None else DEFAULT_DRIVER_RATING,
        completed_jobs=driver.completed_jobs or 0,
        vehicle_type=driver.vehicle.type or DEFAULT_VEHICLE_TYPE,
    )


async def submit_application(
    context: ServiceContext,
    *,
    job_id: str,
    driver_id: str | None = None,
    bid_amount: Any,
    message: str = "",
) -> str:
    """Record ``driver_id``'s bid on ``job_id`` and return the application id."""

    job_id = ensure_identifier(job_id, "job")
    driver_id = context.resolve_user_id(driver_id, role="driver")
    amount = ensure_valid_bid(bid_amount)
    allow_duplicates = context.settings.allow_duplicate_applications

    def work(tx: Transaction) -> JobApplication:
        job_document = tx.get(JOBS_COLLECTION, job_id)
        if job_document is None:
            raise NotFoundError(f"Job {job_id} not found")
        job = JobRepository.to_entity(job_document)

        if not allow_duplicates:
            existing = tx.query(
                APPLICATIONS_COLLECTION,
                ApplicationRepository.filters(
                    job_id=job_id, driver_id=driver_id, statuses=_OPEN_STATUSES
                ),
                limit=1,
            )
            if existing:
                raise ConflictError(
                    f"Driver {driver_id} already has an open application for job {job_id}"
                )

        driver_document = tx.get(DRIVERS_COLLECTION, driver_id)
        driver = DriverRepository.to_entity(driver_document) if driver_document else None

        application = JobApplication(
            id=None,
            job_id=job_id,
            driver_id=driver_id,
            cargo_owner_id=job.owner_id,
            bid_amount=amount,
            job_info=build_job_snapshot(job),
            driver_info=build_driver_snapshot(driver),
            message=message or "",
            status=APPLICATION_STATUS_PENDING,
            submitted_at=tx.server_timestamp(),
        )
        application.id = tx.create(
            APPLICATIONS_COLLECTION, ApplicationRepository.to_document(application)
        )
        tx.update(
            JOBS_COLLECTION,
            job_id,
            {
                "application_count": job.application_count + 1,
                "updated_at": tx.server_timestamp(),
            },
        )
        return application

    application = await context.store.run_transaction(work)
    logger.info(
        "Driver %s applied to job %s with a bid of %s", driver_id, job_id, amount
    )

    if application.cargo_owner_id:
        await dispatch_safely(
            notify_new_job_application(context, application.cargo_owner_id, application),
            description="new application",
        )
    return application.id


__all__ = ["submit_application", "build_driver_snapshot", "build_job_snapshot"]
