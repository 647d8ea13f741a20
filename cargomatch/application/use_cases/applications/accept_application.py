"""Use case for accepting a bid and closing the job to other drivers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_REJECTED,
    JOB_STATUS_ASSIGNED,
    JOB_STATUS_PENDING,
    JobApplication,
    StatusHistoryEntry,
)
from cargomatch.domain.errors import ConflictError, NotFoundError, ValidationError
from cargomatch.infrastructure.document_store import Transaction
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    JOBS_COLLECTION,
    ApplicationRepository,
    JobRepository,
)

from ..notifications import dispatch_safely, notify_job_accepted, notify_job_rejected
from .validators import ensure_identifier, ensure_transition

logger = logging.getLogger(__name__)

ANOTHER_DRIVER_SELECTED = "Another driver was selected"


@dataclass
class AcceptanceOutcome:
    """Applications touched by an acceptance."""

    accepted: JobApplication
    job_title: str
    rejected: list[JobApplication] = field(default_factory=list)


async def accept_application(
    context: ServiceContext,
    *,
    application_id: str,
    job_id: str,
) -> AcceptanceOutcome:
    """Accept ``application_id`` for ``job_id`` and reject every other pending bid.

    The acceptance, the job assignment and the cascade rejection commit
    together; notifications go out only afterwards.
    """

    application_id = ensure_identifier(application_id, "application")
    job_id = ensure_identifier(job_id, "job")

    def work(tx: Transaction) -> AcceptanceOutcome:
        application_document = tx.get(APPLICATIONS_COLLECTION, application_id)
        if application_document is None:
            raise NotFoundError(f"Application {application_id} not found")
        application = ApplicationRepository.to_entity(application_document)
        ensure_transition(application, APPLICATION_STATUS_ACCEPTED)
        if application.job_id != job_id:
            raise ValidationError(
                f"Application {application_id} does not belong to job {job_id}"
            )

        job_document = tx.get(JOBS_COLLECTION, job_id)
        if job_document is None:
            raise NotFoundError(f"Job {job_id} not found")
        job = JobRepository.to_entity(job_document)
        if job.status != JOB_STATUS_PENDING:
            raise ConflictError(f"Job {job_id} is {job.status} and cannot be assigned")

        decided_at = tx.server_timestamp()
        tx.update(
            APPLICATIONS_COLLECTION,
            application_id,
            {"status": APPLICATION_STATUS_ACCEPTED, "decided_at": decided_at},
        )
        application.status = APPLICATION_STATUS_ACCEPTED
        application.decided_at = decided_at

        history = list(job.status_history)
        history.append(
            StatusHistoryEntry(
                status=JOB_STATUS_ASSIGNED,
                timestamp=decided_at,
                note=f"Assigned to driver {application.driver_id}",
            )
        )
        tx.update(
            JOBS_COLLECTION,
            job_id,
            {
                "status": JOB_STATUS_ASSIGNED,
                "assigned_application_id": application_id,
                "assigned_at": decided_at,
                "updated_at": decided_at,
                "status_history": JobRepository.history_to_document(history),
            },
        )

        outcome = AcceptanceOutcome(accepted=application, job_title=job.title)
        competing = tx.query(
            APPLICATIONS_COLLECTION,
            ApplicationRepository.filters(
                job_id=job_id, statuses=(APPLICATION_STATUS_PENDING,)
            ),
        )
        for document in competing:
            if document["id"] == application_id:
                continue
            tx.update(
                APPLICATIONS_COLLECTION,
                document["id"],
                {
                    "status": APPLICATION_STATUS_REJECTED,
                    "decided_at": decided_at,
                    "rejection_reason": ANOTHER_DRIVER_SELECTED,
                },
            )
            loser = ApplicationRepository.to_entity(document)
            loser.status = APPLICATION_STATUS_REJECTED
            loser.decided_at = decided_at
            loser.rejection_reason = ANOTHER_DRIVER_SELECTED
            outcome.rejected.append(loser)
        return outcome

    outcome = await context.store.run_transaction(work)
    logger.info(
        "Application %s accepted for job %s; %s competing applications rejected",
        application_id,
        job_id,
        len(outcome.rejected),
    )

    await dispatch_safely(
        notify_job_accepted(
            context,
            outcome.accepted.driver_id,
            job_id=job_id,
            job_title=outcome.job_title,
            application_id=application_id,
        ),
        description="job accepted",
    )
    for loser in outcome.rejected:
        await dispatch_safely(
            notify_job_rejected(
                context,
                loser.driver_id,
                job_id=job_id,
                job_title=outcome.job_title,
                application_id=loser.id,
                reason=ANOTHER_DRIVER_SELECTED,
            ),
            description="job rejected",
        )
    return outcome


__all__ = ["accept_application", "AcceptanceOutcome", "ANOTHER_DRIVER_SELECTED"]
