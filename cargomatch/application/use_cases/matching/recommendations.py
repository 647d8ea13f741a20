"""Use cases ranking drivers for a job and jobs for a driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    DRIVER_STATUS_AVAILABLE,
    JOB_STATUS_PENDING,
    DriverProfile,
    JobPosting,
)
from cargomatch.domain.errors import NotFoundError
from cargomatch.infrastructure.repositories import DriverRepository, JobRepository

from .scoring import (
    compute_job_match_score,
    compute_match_score,
    estimate_cost,
    estimate_earnings,
)

logger = logging.getLogger(__name__)

RECOMMENDED_DRIVERS_LIMIT = 10
RECOMMENDED_JOBS_LIMIT = 5
RECOMMENDED_JOBS_CANDIDATES = 20
RECOMMENDED_JOBS_MIN_SCORE = 60


@dataclass(frozen=True)
class DriverRecommendation:
    """Driver suggested for a job together with its score and estimated cost."""

    driver: DriverProfile
    match_score: int
    estimated_cost: int


@dataclass(frozen=True)
class JobRecommendation:
    """Job suggested to a driver together with its score and estimated earnings."""

    job: JobPosting
    match_score: int
    estimated_earnings: float


async def get_recommended_drivers(
    context: ServiceContext, job_id: str
) -> list[DriverRecommendation]:
    """Return the best available drivers for ``job_id``, highest score first."""

    job = await JobRepository(context.store).get(job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")

    drivers = await DriverRepository(context.store).list(status=DRIVER_STATUS_AVAILABLE)
    ranked = [
        DriverRecommendation(
            driver=driver,
            match_score=compute_match_score(job, driver),
            estimated_cost=estimate_cost(job, driver),
        )
        for driver in drivers
    ]
    ranked.sort(key=lambda item: item.match_score, reverse=True)
    logger.debug("Scored %s available drivers for job %s", len(ranked), job_id)
    return ranked[:RECOMMENDED_DRIVERS_LIMIT]


async def get_recommended_jobs_for_driver(
    context: ServiceContext, driver_id: str
) -> list[JobRecommendation]:
    """Return the most compatible recent pending jobs for ``driver_id``."""

    driver = await DriverRepository(context.store).get(driver_id)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")

    jobs = await JobRepository(context.store).list(
        status=JOB_STATUS_PENDING, limit=RECOMMENDED_JOBS_CANDIDATES
    )
    ranked: list[JobRecommendation] = []
    for job in jobs:
        score = compute_job_match_score(job, driver)
        if score <= RECOMMENDED_JOBS_MIN_SCORE:
            continue
        ranked.append(
            JobRecommendation(
                job=job,
                match_score=score,
                estimated_earnings=estimate_earnings(job, driver),
            )
        )
    ranked.sort(key=lambda item: item.match_score, reverse=True)
    return ranked[:RECOMMENDED_JOBS_LIMIT]


__all__ = [
    "DriverRecommendation",
    "JobRecommendation",
    "get_recommended_drivers",
    "get_recommended_jobs_for_driver",
]
