"""Live dashboards for cargo owners and drivers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_PENDING,
    JobApplication,
    JobPosting,
)
from cargomatch.infrastructure.repositories import (
    APPLICATIONS_COLLECTION,
    JOBS_COLLECTION,
    ApplicationRepository,
    JobRepository,
    NotificationRepository,
)

from ..applications.validators import ensure_identifier
from .aggregator import DashboardAggregator, DashboardCallback

CARGO_SHIPMENTS_LIMIT = 10
CARGO_APPLICATIONS_LIMIT = 5
DRIVER_ACTIVE_JOBS_LIMIT = 5
DRIVER_APPLICATIONS_LIMIT = 10
UNREAD_NOTIFICATIONS_LIMIT = 5

CARGO_DASHBOARD_SLICES = ("shipments", "applications", "notifications")
DRIVER_DASHBOARD_SLICES = ("active_jobs", "applications", "notifications")


@dataclass(frozen=True)
class ActiveJob:
    """Accepted application joined with the job it won."""

    application: JobApplication
    job: JobPosting


class _ActiveJobsJoin:
    """Join accepted applications with their jobs in one batched read.

    Only the result for the most recent snapshot is published, so a slow join
    for an older snapshot cannot overwrite a newer one.
    """

    def __init__(self, jobs: JobRepository, aggregator: DashboardAggregator) -> None:
        self._jobs = jobs
        self._aggregator = aggregator
        self._generation = 0

    async def __call__(self, documents: list[dict[str, Any]]) -> None:
        self._generation += 1
        generation = self._generation
        applications = [ApplicationRepository.to_entity(document) for document in documents]
        postings = await self._jobs.get_many([application.job_id for application in applications])
        if generation != self._generation:
            return
        await self._aggregator.publish(
            "active_jobs",
            [
                ActiveJob(application=application, job=postings[application.job_id])
                for application in applications
                if application.job_id in postings
            ],
        )


def _as_entities(
    aggregator: DashboardAggregator, name: str, mapper: Callable[[dict[str, Any]], Any]
) -> Callable[[list[dict[str, Any]]], Awaitable[None]]:
    publish = aggregator.feed(name)

    async def receive(documents: list[dict[str, Any]]) -> None:
        await publish([mapper(document) for document in documents])

    return receive


async def _subscribe_notifications(
    context: ServiceContext, aggregator: DashboardAggregator, user_id: str
) -> None:
    aggregator.attach(
        await NotificationRepository(context.store).subscribe(
            user_id,
            aggregator.feed("notifications"),
            limit=UNREAD_NOTIFICATIONS_LIMIT,
            unread_only=True,
        )
    )


async def subscribe_to_cargo_dashboard(
    context: ServiceContext, owner_id: str, callback: DashboardCallback
) -> DashboardAggregator:
    """Keep ``callback`` updated with the cargo owner's shipments, bids and alerts."""

    owner_id = ensure_identifier(owner_id, "cargo owner")
    aggregator = DashboardAggregator(callback, slices=CARGO_DASHBOARD_SLICES)
    store = context.store
    try:
        aggregator.attach(
            await store.subscribe(
                JOBS_COLLECTION,
                _as_entities(aggregator, "shipments", JobRepository.to_entity),
                JobRepository.filters(owner_id=owner_id),
                [("created_at", "desc")],
                CARGO_SHIPMENTS_LIMIT,
            )
        )
        aggregator.attach(
            await store.subscribe(
                APPLICATIONS_COLLECTION,
                _as_entities(aggregator, "applications", ApplicationRepository.to_entity),
                ApplicationRepository.filters(
                    cargo_owner_id=owner_id, statuses=(APPLICATION_STATUS_PENDING,)
                ),
                [("submitted_at", "desc")],
                CARGO_APPLICATIONS_LIMIT,
            )
        )
        await _subscribe_notifications(context, aggregator, owner_id)
    except Exception:
        aggregator.close()
        raise
    return aggregator


async def subscribe_to_driver_dashboard(
    context: ServiceContext, driver_id: str, callback: DashboardCallback
) -> DashboardAggregator:
    """Keep ``callback`` updated with the driver's active jobs, bids and alerts."""

    driver_id = ensure_identifier(driver_id, "driver")
    aggregator = DashboardAggregator(callback, slices=DRIVER_DASHBOARD_SLICES)
    store = context.store
    try:
        aggregator.attach(
            await store.subscribe(
                APPLICATIONS_COLLECTION,
                _ActiveJobsJoin(JobRepository(store), aggregator),
                ApplicationRepository.filters(
                    driver_id=driver_id, statuses=(APPLICATION_STATUS_ACCEPTED,)
                ),
                [("decided_at", "desc")],
                DRIVER_ACTIVE_JOBS_LIMIT,
            )
        )
        aggregator.attach(
            await store.subscribe(
                APPLICATIONS_COLLECTION,
                _as_entities(aggregator, "applications", ApplicationRepository.to_entity),
                ApplicationRepository.filters(driver_id=driver_id),
                [("submitted_at", "desc")],
                DRIVER_APPLICATIONS_LIMIT,
            )
        )
        await _subscribe_notifications(context, aggregator, driver_id)
    except Exception:
        aggregator.close()
        raise
    return aggregator


__all__ = [
    "ActiveJob",
    "CARGO_DASHBOARD_SLICES",
    "DRIVER_DASHBOARD_SLICES",
    "subscribe_to_cargo_dashboard",
    "subscribe_to_driver_dashboard",
]
