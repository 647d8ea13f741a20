"""Use cases reading job applications, once or as live snapshots."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import JobApplication
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    ApplicationRepository,
)

from .validators import ensure_identifier

DEFAULT_DRIVER_LIMIT = 50

ApplicationsCallback = Callable[[list[JobApplication]], Any]


async def get_job_applications(context: ServiceContext, job_id: str) -> list[JobApplication]:
    """Return every application for ``job_id``, newest first."""

    job_id = ensure_identifier(job_id, "job")
    return await ApplicationRepository(context.store).list(job_id=job_id)


async def get_driver_applications(
    context: ServiceContext,
    driver_id: str | None = None,
    *,
    limit: int = DEFAULT_DRIVER_LIMIT,
) -> list[JobApplication]:
    """Return the driver's most recent applications, newest first."""

    driver_id = context.resolve_user_id(driver_id, role="driver")
    return await ApplicationRepository(context.store).list(driver_id=driver_id, limit=limit)


async def _subscribe(
    context: ServiceContext,
    callback: ApplicationsCallback,
    *,
    limit: int | None = None,
    **criteria: Any,
) -> Callable[[], None]:
    def deliver(documents: list[dict[str, Any]]) -> Any:
        return callback([ApplicationRepository.to_entity(document) for document in documents])

    return await context.store.subscribe(
        APPLICATIONS_COLLECTION,
        deliver,
        ApplicationRepository.filters(**criteria),
        [("submitted_at", "desc")],
        limit,
    )


async def subscribe_to_job_applications(
    context: ServiceContext, job_id: str, callback: ApplicationsCallback
) -> Callable[[], None]:
    """Push the applications of ``job_id`` to ``callback`` whenever they change."""

    job_id = ensure_identifier(job_id, "job")
    return await _subscribe(context, callback, job_id=job_id)


async def subscribe_to_driver_applications(
    context: ServiceContext,
    driver_id: str,
    callback: ApplicationsCallback,
    *,
    limit: int = DEFAULT_DRIVER_LIMIT,
) -> Callable[[], None]:
    """Push the driver's applications to ``callback`` whenever they change."""

    driver_id = ensure_identifier(driver_id, "driver")
    return await _subscribe(context, callback, limit=limit, driver_id=driver_id)


__all__ = [
    "get_job_applications",
    "get_driver_applications",
    "subscribe_to_job_applications",
    "subscribe_to_driver_applications",
]
