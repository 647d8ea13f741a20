"""Unit tests for the job/driver compatibility scores and estimates."""

from __future__ import annotations

import pytest

from cargomatch.application.use_cases.matching import (
    compute_job_match_score,
    compute_match_score,
    estimate_cost,
    estimate_earnings,
)
from cargomatch.domain.entities import DriverProfile, JobPosting, Location, Vehicle


def _build_job(**overrides) -> JobPosting:
    values = {
        "id": "job-1",
        "owner_id": "owner-1",
        "title": "Pallets",
        "pickup": Location(address="Chicago"),
        "delivery": Location(address="Detroit"),
        "required_vehicle_type": "box truck",
    }
    values.update(overrides)
    return JobPosting(**values)


def _build_driver(**overrides) -> DriverProfile:
    values = {
        "id": "driver-a",
        "name": "Driver A",
        "vehicle": Vehicle(type="Box Truck"),
        "rating": 4.5,
        "completed_jobs": 20,
        "current_location": "Chicago",
        "status": "available",
    }
    values.update(overrides)
    return DriverProfile(**values)


def test_strong_local_driver_reaches_the_maximum_score() -> None:
    assert compute_match_score(_build_job(), _build_driver()) == 100


def test_match_score_without_any_signal() -> None:
    driver = _build_driver(
        vehicle=Vehicle(type=None),
        rating=3.0,
        completed_jobs=0,
        current_location=None,
        status="offline",
    )

    assert compute_match_score(_build_job(), driver) == 50


def test_match_score_treats_missing_rating_as_zero() -> None:
    driver = _build_driver(
        vehicle=Vehicle(type="Flatbed"),
        rating=None,
        completed_jobs=0,
        current_location="Miami",
        status="busy",
    )

    # 50 + (0 - 3) * 10
    assert compute_match_score(_build_job(), driver) == 20


def test_match_score_rounds_fractional_experience_half_up() -> None:
    driver = _build_driver(
        vehicle=Vehicle(type="Flatbed"),
        rating=3.0,
        completed_jobs=5,
        current_location="Miami",
        status="busy",
    )

    # 50 + 0.5
    assert compute_match_score(_build_job(), driver) == 51


@pytest.mark.parametrize("rating", [0.0, 1.0, 5.0])
@pytest.mark.parametrize("completed_jobs", [0, 40, 1000])
def test_match_scores_stay_within_bounds(rating: float, completed_jobs: int) -> None:
    driver = _build_driver(rating=rating, completed_jobs=completed_jobs)
    job = _build_job()

    assert 0 <= compute_match_score(job, driver) <= 100
    assert 0 <= compute_job_match_score(job, driver) <= 100


def test_job_match_score_uses_its_own_weights() -> None:
    job = _build_job(pickup=Location(address="Chicago, IL"), budget=1000.0, urgency="urgent")
    driver = _build_driver(
        current_location="chicago, il",
        rating=5.0,
        completed_jobs=40,
        average_bid=900.0,
    )

    # 50 + 25 + 20 + 10 + 2 + 15 + 10, clamped
    assert compute_job_match_score(job, driver) == 100


def test_job_match_score_partial_city_and_default_rating() -> None:
    job = _build_job(pickup=Location(address="Greater Chicago Area"))
    driver = _build_driver(
        vehicle=Vehicle(type="Reefer"),
        current_location="Chicago",
        rating=None,
        completed_jobs=0,
        status="busy",
    )

    # 50 + partial city 10 + (4.0 - 3) * 5
    assert compute_job_match_score(job, driver) == 65


def test_estimate_cost_applies_defaults_and_urgency() -> None:
    driver = _build_driver()

    assert estimate_cost(_build_job(), driver) == 250
    assert estimate_cost(_build_job(urgency="urgent"), driver) == 325
    assert (
        estimate_cost(
            _build_job(estimated_distance=10.0), _build_driver(price_per_distance_unit=1.25)
        )
        == 13
    )


def test_estimate_earnings_prefers_the_larger_amount() -> None:
    driver = _build_driver(price_per_distance_unit=2.0)

    assert estimate_earnings(_build_job(budget=900.0, estimated_distance=100.0), driver) == 900.0
    assert estimate_earnings(_build_job(budget=None, estimated_distance=300.0), driver) == 600.0
