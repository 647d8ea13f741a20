"""Matching engine: compatibility scores, estimates and recommendations."""

from .recommendations import (
    DriverRecommendation,
    JobRecommendation,
    get_recommended_drivers,
    get_recommended_jobs_for_driver,
)
from .scoring import (
    compute_job_match_score,
    compute_match_score,
    estimate_cost,
    estimate_earnings,
)

__all__ = [
    "DriverRecommendation",
    "JobRecommendation",
    "get_recommended_drivers",
    "get_recommended_jobs_for_driver",
    "compute_job_match_score",
    "compute_match_score",
    "estimate_cost",
    "estimate_earnings",
]
