"""Use case for withdrawing a job before it is picked up."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_REJECTED,
    JOB_STATUS_CANCELLED,
    JobApplication,
    JobPosting,
)
from cargomatch.domain.errors import ConflictError, NotFoundError
from cargomatch.infrastructure.document_store import Transaction
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    JOBS_COLLECTION,
    ApplicationRepository,
    JobRepository,
)

from ..applications.validators import ensure_identifier
from ..notifications import dispatch_safely, notify_job_rejected
from .update_job_status import append_history

logger = logging.getLogger(__name__)

JOB_CANCELLED_REASON = "Job was cancelled"


@dataclass
class CancellationOutcome:
    job: JobPosting
    rejected: list[JobApplication] = field(default_factory=list)


async def cancel_job(
    context: ServiceContext,
    *,
    job_id: str,
    note: str = "",
) -> CancellationOutcome:
    """Cancel ``job_id`` and reject every application still waiting on it."""

    job_id = ensure_identifier(job_id, "job")

    def work(tx: Transaction) -> CancellationOutcome:
        document = tx.get(JOBS_COLLECTION, job_id)
        if document is None:
            raise NotFoundError(f"Job {job_id} not found")
        job = JobRepository.to_entity(document)
        if not job.can_transition_to(JOB_STATUS_CANCELLED):
            raise ConflictError(f"Job {job_id} is {job.status} and cannot be cancelled")
        tx.update(
            JOBS_COLLECTION,
            job_id,
            append_history(tx, job, JOB_STATUS_CANCELLED, note or JOB_CANCELLED_REASON),
        )

        outcome = CancellationOutcome(job=job)
        decided_at = tx.server_timestamp()
        pending = tx.query(
            APPLICATIONS_COLLECTION,
            ApplicationRepository.filters(
                job_id=job_id, statuses=(APPLICATION_STATUS_PENDING,)
            ),
        )
        for application_document in pending:
            tx.update(
                APPLICATIONS_COLLECTION,
                application_document["id"],
                {
                    "status": APPLICATION_STATUS_REJECTED,
                    "decided_at": decided_at,
                    "rejection_reason": JOB_CANCELLED_REASON,
                },
            )
            application = ApplicationRepository.to_entity(application_document)
            application.status = APPLICATION_STATUS_REJECTED
            application.decided_at = decided_at
            application.rejection_reason = JOB_CANCELLED_REASON
            outcome.rejected.append(application)
        return outcome

    outcome = await context.store.run_transaction(work)
    logger.info(
        "Job %s cancelled; %s pending applications rejected", job_id, len(outcome.rejected)
    )

    for application in outcome.rejected:
        await dispatch_safely(
            notify_job_rejected(
                context,
                application.driver_id,
                job_id=job_id,
                job_title=outcome.job.title,
                application_id=application.id,
                reason=JOB_CANCELLED_REASON,
            ),
            description="job rejected",
        )
    return outcome


__all__ = ["cancel_job", "CancellationOutcome", "JOB_CANCELLED_REASON"]
