"""Use cases letting a cargo owner invite a specific driver to bid."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    INVITATION_STATUS_ACCEPTED,
    INVITATION_STATUS_EXPIRED,
    INVITATION_STATUS_SENT,
    DriverInvitation,
)
from cargomatch.domain.errors import NotFoundError
from cargomatch.infrastructure.repositories import InvitationRepository, JobRepository
from cargomatch.utils import now_utc

from ..applications.validators import ensure_identifier
from ..notifications import dispatch_safely, notify_driver_invitation

logger = logging.getLogger(__name__)

INVITATION_LIFETIME = timedelta(hours=24)
DEFAULT_CARGO_OWNER_NAME = "A cargo owner"

_VISIBLE_STATUSES = (INVITATION_STATUS_SENT, INVITATION_STATUS_ACCEPTED)


async def invite_driver(
    context: ServiceContext,
    *,
    job_id: str,
    driver_id: str,
    message: str = "",
    cargo_owner_name: str | None = None,
) -> DriverInvitation:
    """Persist an invitation valid for 24 hours and notify the driver."""

    job_id = ensure_identifier(job_id, "job")
    driver_id = ensure_identifier(driver_id, "driver")

    job = await JobRepository(context.store).get(job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")

    sent_at = context.store.server_timestamp()
    expires_at = sent_at + INVITATION_LIFETIME
    invitation_id = await InvitationRepository(context.store).create(
        job_id=job_id,
        driver_id=driver_id,
        message=message or "",
        status=INVITATION_STATUS_SENT,
        sent_at=sent_at,
        expires_at=expires_at,
    )
    logger.info("Driver %s invited to job %s", driver_id, job_id)

    await dispatch_safely(
        notify_driver_invitation(
            context,
            driver_id,
            job_id=job_id,
            job_title=job.title,
            cargo_owner_name=cargo_owner_name or DEFAULT_CARGO_OWNER_NAME,
        ),
        description="driver invitation",
    )
    return DriverInvitation(
        id=invitation_id,
        job_id=job_id,
        driver_id=driver_id,
        message=message or "",
        status=INVITATION_STATUS_SENT,
        sent_at=sent_at,
        expires_at=expires_at,
    )


async def get_driver_invitations(
    context: ServiceContext, driver_id: str | None = None
) -> list[DriverInvitation]:
    """Return the driver's open and accepted invitations, newest first.

    Sent invitations past their expiry are reported as expired.
    """

    driver_id = context.resolve_user_id(driver_id, role="driver")
    invitations = await InvitationRepository(context.store).list_for_driver(
        driver_id, statuses=_VISIBLE_STATUSES
    )
    now = now_utc()
    return [
        replace(invitation, status=INVITATION_STATUS_EXPIRED)
        if invitation.status == INVITATION_STATUS_SENT
        and invitation.expires_at is not None
        and invitation.expires_at <= now
        else invitation
        for invitation in invitations
    ]


__all__ = ["invite_driver", "get_driver_invitations", "INVITATION_LIFETIME"]
