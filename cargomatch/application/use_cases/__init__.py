"""Aggregate application use cases."""

from .applications import (
    accept_application,
    complete_job,
    reject_application,
    submit_application,
)
from .matching import get_recommended_drivers, get_recommended_jobs_for_driver

__all__ = [
    "accept_application",
    "complete_job",
    "get_recommended_drivers",
    "get_recommended_jobs_for_driver",
    "reject_application",
    "submit_application",
]
