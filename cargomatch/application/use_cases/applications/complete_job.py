"""Use case for closing a delivered job and paying the driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_COMPLETED,
    DEFAULT_DRIVER_RATING,
    JOB_STATUS_ASSIGNED,
    JOB_STATUS_DELIVERED,
    JOB_STATUS_IN_TRANSIT,
    JOB_STATUS_PICKED_UP,
    DriverProfile,
    JobApplication,
    StatusHistoryEntry,
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

from ..notifications import dispatch_safely, notify_job_status_update, notify_payment_received
from .validators import ensure_identifier, ensure_transition, ensure_valid_rating

logger = logging.getLogger(__name__)

# Job statuses from which a delivery can still be confirmed.
COMPLETABLE_JOB_STATUSES = (JOB_STATUS_ASSIGNED, JOB_STATUS_PICKED_UP, JOB_STATUS_IN_TRANSIT)


@dataclass
class CompletionOutcome:
    """State written by a completed job."""

    application: JobApplication
    job_title: str
    cargo_owner_id: str
    driver: DriverProfile | None


def recompute_rating(previous: float | None, completed_jobs: int, incoming: float) -> float:
    """Return the running average after ``incoming`` joined ``completed_jobs`` ratings.

    ``completed_jobs`` is the count including the job being rated.
    """

    base = previous if previous is not None else DEFAULT_DRIVER_RATING
    count = max(completed_jobs, 1)
    return (base * (count - 1) + incoming) / count


async def complete_job(
    context: ServiceContext,
    *,
    application_id: str,
    rating: Any = 5,
) -> CompletionOutcome:
    """Mark an accepted application completed and settle the driver's statistics."""

    application_id = ensure_identifier(application_id, "application")
    owner_rating = ensure_valid_rating(rating)

    def work(tx: Transaction) -> CompletionOutcome:
        document = tx.get(APPLICATIONS_COLLECTION, application_id)
        if document is None:
            raise NotFoundError(f"Application {application_id} not found")
        application = ApplicationRepository.to_entity(document)
        ensure_transition(application, APPLICATION_STATUS_COMPLETED)

        job_document = tx.get(JOBS_COLLECTION, application.job_id)
        if job_document is None:
            raise NotFoundError(f"Job {application.job_id} not found")
        job = JobRepository.to_entity(job_document)
        if job.status not in COMPLETABLE_JOB_STATUSES:
            raise ConflictError(
                f"Job {job.id} is {job.status} and cannot be marked delivered"
            )

        completed_at = tx.server_timestamp()
        tx.update(
            APPLICATIONS_COLLECTION,
            application_id,
            {
                "status": APPLICATION_STATUS_COMPLETED,
                "completed_at": completed_at,
                "final_amount": application.bid_amount,
                "owner_rating": owner_rating,
            },
        )
        application.status = APPLICATION_STATUS_COMPLETED
        application.completed_at = completed_at
        application.final_amount = application.bid_amount
        application.owner_rating = owner_rating

        history = list(job.status_history)
        history.append(
            StatusHistoryEntry(
                status=JOB_STATUS_DELIVERED,
                timestamp=completed_at,
                note="Delivery confirmed by cargo owner",
            )
        )
        tx.update(
            JOBS_COLLECTION,
            job.id,
            {
                "status": JOB_STATUS_DELIVERED,
                "delivered_at": completed_at,
                "updated_at": completed_at,
                "completed_application_id": application_id,
                "status_history": JobRepository.history_to_document(history),
            },
        )

        driver_document = tx.get(DRIVERS_COLLECTION, application.driver_id)
        driver: DriverProfile | None = None
        if driver_document is None:
            logger.warning(
                "Driver %s has no profile; statistics were not updated",
                application.driver_id,
            )
        else:
            driver = DriverRepository.to_entity(driver_document)
            driver.completed_jobs += 1
            driver.total_earnings += application.bid_amount
            driver.rating = recompute_rating(
                driver.rating, driver.completed_jobs, owner_rating
            )
            driver.last_job_completed_at = completed_at
            tx.update(
                DRIVERS_COLLECTION,
                application.driver_id,
                {
                    "completed_jobs": driver.completed_jobs,
                    "total_earnings": driver.total_earnings,
                    "rating": driver.rating,
                    "last_job_completed_at": completed_at,
                },
            )

        return CompletionOutcome(
            application=application,
            job_title=job.title,
            cargo_owner_id=job.owner_id,
            driver=driver,
        )

    outcome = await context.store.run_transaction(work)
    logger.info(
        "Application %s completed with a final amount of %s",
        application_id,
        outcome.application.final_amount,
    )

    await dispatch_safely(
        notify_payment_received(
            context,
            outcome.application.driver_id,
            outcome.application.bid_amount,
            outcome.job_title,
        ),
        description="payment",
    )
    if outcome.cargo_owner_id:
        await dispatch_safely(
            notify_job_status_update(
                context, outcome.cargo_owner_id, outcome.job_title, JOB_STATUS_DELIVERED
            ),
            description="job status",
        )
    return outcome


__all__ = ["complete_job", "CompletionOutcome", "recompute_rating"]
