"""Use cases driving the job application lifecycle."""

from .accept_application import ANOTHER_DRIVER_SELECTED, AcceptanceOutcome, accept_application
from .complete_job import CompletionOutcome, complete_job, recompute_rating
from .list_applications import (
    get_driver_applications,
    get_job_applications,
    subscribe_to_driver_applications,
    subscribe_to_job_applications,
)
from .reject_application import reject_application
from .submit_application import submit_application

__all__ = [
    "ANOTHER_DRIVER_SELECTED",
    "AcceptanceOutcome",
    "CompletionOutcome",
    "accept_application",
    "complete_job",
    "get_driver_applications",
    "get_job_applications",
    "recompute_rating",
    "reject_application",
    "submit_application",
    "subscribe_to_driver_applications",
    "subscribe_to_job_applications",
]
