"""Heuristic compatibility scores between jobs and drivers.

Two weight tables exist on purpose. :func:`compute_match_score` ranks drivers
for a cargo owner's job, while :func:`compute_job_match_score` ranks pending
jobs for a driver. They look alike but weigh the same signals differently, so
they are kept as separate functions.
"""

from __future__ import annotations

import math

from cargomatch.domain.entities import (
    DRIVER_STATUS_AVAILABLE,
    URGENCY_URGENT,
    DriverProfile,
    JobPosting,
)

MIN_SCORE = 0
MAX_SCORE = 100
BASE_SCORE = 50

DEFAULT_RATE_PER_DISTANCE_UNIT = 2.5
DEFAULT_ESTIMATED_DISTANCE = 100.0
URGENT_COST_MULTIPLIER = 1.3

# Driver ranking for a job.
DRIVER_VEHICLE_FIT_BONUS = 20
DRIVER_RATING_WEIGHT = 10
DRIVER_EXPERIENCE_DIVISOR = 10
DRIVER_EXPERIENCE_CAP = 15
DRIVER_PROXIMITY_BONUS = 15
DRIVER_AVAILABILITY_BONUS = 10

# Job ranking for a driver.
JOB_VEHICLE_FIT_BONUS = 25
JOB_CITY_MATCH_BONUS = 20
JOB_CITY_PARTIAL_BONUS = 10
JOB_RATING_WEIGHT = 5
JOB_DEFAULT_RATING = 4.0
JOB_EXPERIENCE_DIVISOR = 20
JOB_EXPERIENCE_CAP = 10
JOB_BUDGET_FIT_BONUS = 15
JOB_BUDGET_RATIO_RANGE = (0.8, 1.2)
JOB_URGENCY_BONUS = 10


def _normalized(value: str | None) -> str:
    return (value or "").strip().lower()


def _overlaps(first: str, second: str) -> bool:
    """Return ``True`` when either non-empty string contains the other."""

    if not first or not second:
        return False
    return first in second or second in first


def _city_of(location: str) -> str:
    return location.split(",")[0].strip()


def _finalize(score: float) -> int:
    clamped = min(max(score, MIN_SCORE), MAX_SCORE)
    return int(math.floor(clamped + 0.5))


def compute_match_score(job: JobPosting, driver: DriverProfile) -> int:
    """Return how well ``driver`` fits ``job`` on a 0-100 scale."""

    score: float = BASE_SCORE

    if _overlaps(_normalized(driver.vehicle.type), _normalized(job.required_vehicle_type)):
        score += DRIVER_VEHICLE_FIT_BONUS

    rating = driver.rating if driver.rating is not None else 0.0
    score += (rating - 3) * DRIVER_RATING_WEIGHT
    score += min(max(driver.completed_jobs, 0) / DRIVER_EXPERIENCE_DIVISOR, DRIVER_EXPERIENCE_CAP)

    if _overlaps(_normalized(job.pickup.label), _normalized(driver.current_location)):
        score += DRIVER_PROXIMITY_BONUS

    if driver.status == DRIVER_STATUS_AVAILABLE:
        score += DRIVER_AVAILABILITY_BONUS

    return _finalize(score)


def compute_job_match_score(job: JobPosting, driver: DriverProfile) -> int:
    """Return how attractive ``job`` is for ``driver`` on a 0-100 scale."""

    score: float = BASE_SCORE

    if _overlaps(_normalized(driver.vehicle.type), _normalized(job.required_vehicle_type)):
        score += JOB_VEHICLE_FIT_BONUS

    driver_location = _normalized(driver.current_location)
    pickup_location = _normalized(job.pickup.label)
    if driver_location and pickup_location:
        driver_city = _city_of(driver_location)
        pickup_city = _normalized(job.pickup.city) or _city_of(pickup_location)
        if driver_city and driver_city == pickup_city:
            score += JOB_CITY_MATCH_BONUS
        elif (driver_city and driver_city in pickup_location) or (
            pickup_city and pickup_city in driver_location
        ):
            score += JOB_CITY_PARTIAL_BONUS

    rating = driver.rating if driver.rating else JOB_DEFAULT_RATING
    score += (rating - 3) * JOB_RATING_WEIGHT
    score += min(max(driver.completed_jobs, 0) / JOB_EXPERIENCE_DIVISOR, JOB_EXPERIENCE_CAP)

    if job.budget and driver.average_bid:
        ratio = job.budget / driver.average_bid
        low, high = JOB_BUDGET_RATIO_RANGE
        if low <= ratio <= high:
            score += JOB_BUDGET_FIT_BONUS

    if job.urgency == URGENCY_URGENT and driver.status == DRIVER_STATUS_AVAILABLE:
        score += JOB_URGENCY_BONUS

    return _finalize(score)


def _rate_and_distance(job: JobPosting, driver: DriverProfile) -> tuple[float, float]:
    rate = driver.price_per_distance_unit or DEFAULT_RATE_PER_DISTANCE_UNIT
    distance = job.estimated_distance or DEFAULT_ESTIMATED_DISTANCE
    return rate, distance


def estimate_cost(job: JobPosting, driver: DriverProfile) -> int:
    """Estimate what ``driver`` would charge for ``job``, rounded to whole units."""

    rate, distance = _rate_and_distance(job, driver)
    multiplier = URGENT_COST_MULTIPLIER if job.urgency == URGENCY_URGENT else 1.0
    return int(math.floor(rate * distance * multiplier + 0.5))


def estimate_earnings(job: JobPosting, driver: DriverProfile) -> float:
    """Estimate what ``driver`` would earn: the budget or the distance-based price."""

    rate, distance = _rate_and_distance(job, driver)
    return max(job.budget or 0.0, rate * distance)


__all__ = [
    "compute_match_score",
    "compute_job_match_score",
    "estimate_cost",
    "estimate_earnings",
]
