"""Use case for recording the progress of an assigned shipment."""

from __future__ import annotations

import logging

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    JOB_STATUS_ASSIGNED,
    JOB_STATUS_CANCELLED,
    JOB_STATUS_DELIVERED,
    JOB_STATUS_IN_TRANSIT,
    JOB_STATUS_PICKED_UP,
    JOB_STATUSES,
    JobPosting,
    StatusHistoryEntry,
)
from cargomatch.domain.errors import ConflictError, NotFoundError, ValidationError
from cargomatch.infrastructure.document_store import Transaction
from cargomatch.infrastructure.repositories import JOBS_COLLECTION, JobRepository

from ..applications.validators import ensure_identifier
from ..notifications import dispatch_safely, notify_job_status_update

logger = logging.getLogger(__name__)

# Statuses that tell the cargo owner where their cargo is.
TRACKED_STATUSES = (JOB_STATUS_PICKED_UP, JOB_STATUS_IN_TRANSIT, JOB_STATUS_DELIVERED)


def append_history(
    tx: Transaction, job: JobPosting, status: str, note: str
) -> dict[str, object]:
    """Return the changes moving ``job`` to ``status`` with a new history entry."""

    timestamp = tx.server_timestamp()
    history = list(job.status_history)
    history.append(StatusHistoryEntry(status=status, timestamp=timestamp, note=note))
    changes: dict[str, object] = {
        "status": status,
        "updated_at": timestamp,
        "status_history": JobRepository.history_to_document(history),
    }
    if status == JOB_STATUS_DELIVERED:
        changes["delivered_at"] = timestamp
    job.status = status
    job.status_history = history
    job.updated_at = timestamp
    return changes


async def update_job_status(
    context: ServiceContext,
    *,
    job_id: str,
    status: str,
    note: str = "",
) -> JobPosting:
    """Advance ``job_id`` to ``status`` and tell the cargo owner."""

    job_id = ensure_identifier(job_id, "job")
    if status not in JOB_STATUSES:
        raise ValidationError(f"Unknown job status '{status}'")
    if status == JOB_STATUS_ASSIGNED:
        raise ValidationError("Jobs are assigned by accepting an application")
    if status == JOB_STATUS_CANCELLED:
        raise ValidationError("Jobs are cancelled through cancel_job")

    def work(tx: Transaction) -> JobPosting:
        document = tx.get(JOBS_COLLECTION, job_id)
        if document is None:
            raise NotFoundError(f"Job {job_id} not found")
        job = JobRepository.to_entity(document)
        if not job.can_transition_to(status):
            raise ConflictError(f"Job {job_id} is {job.status} and cannot become {status}")
        tx.update(JOBS_COLLECTION, job_id, append_history(tx, job, status, note))
        return job

    job = await context.store.run_transaction(work)
    logger.info("Job %s moved to %s", job_id, status)

    if status in TRACKED_STATUSES and job.owner_id:
        await dispatch_safely(
            notify_job_status_update(context, job.owner_id, job.title, status),
            description="job status",
        )
    return job


__all__ = ["update_job_status", "append_history", "TRACKED_STATUSES"]
