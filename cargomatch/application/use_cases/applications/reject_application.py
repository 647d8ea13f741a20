"""Use case for declining a single bid."""

from __future__ import annotations

import logging

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import APPLICATION_STATUS_REJECTED, JobApplication
from cargomatch.domain.errors import NotFoundError
from cargomatch.infrastructure.document_store import Transaction
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    ApplicationRepository,
)

from ..notifications import dispatch_safely, notify_job_rejected
from .validators import ensure_identifier, ensure_transition

logger = logging.getLogger(__name__)


async def reject_application(
    context: ServiceContext,
    *,
    application_id: str,
    reason: str = "",
) -> JobApplication:
    """Reject a pending application and tell the driver why."""

    application_id = ensure_identifier(application_id, "application")
    reason = (reason or "").strip()

    def work(tx: Transaction) -> JobApplication:
        document = tx.get(APPLICATIONS_COLLECTION, application_id)
        if document is None:
            raise NotFoundError(f"Application {application_id} not found")
        application = ApplicationRepository.to_entity(document)
        ensure_transition(application, APPLICATION_STATUS_REJECTED)

        decided_at = tx.server_timestamp()
        tx.update(
            APPLICATIONS_COLLECTION,
            application_id,
            {
                "status": APPLICATION_STATUS_REJECTED,
                "decided_at": decided_at,
                "rejection_reason": reason,
            },
        )
        application.status = APPLICATION_STATUS_REJECTED
        application.decided_at = decided_at
        application.rejection_reason = reason
        return application

    application = await context.store.run_transaction(work)
    logger.info("Application %s rejected", application_id)

    await dispatch_safely(
        notify_job_rejected(
            context,
            application.driver_id,
            job_id=application.job_id,
            job_title=application.job_info.title,
            application_id=application_id,
            reason=reason,
        ),
        description="job rejected",
    )
    return application


__all__ = ["reject_application"]
