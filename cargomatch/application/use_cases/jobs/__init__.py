"""Use cases tracking a shipment after it was posted."""

from .cancel_job import JOB_CANCELLED_REASON, CancellationOutcome, cancel_job
from .update_job_status import TRACKED_STATUSES, update_job_status

__all__ = [
    "JOB_CANCELLED_REASON",
    "TRACKED_STATUSES",
    "CancellationOutcome",
    "cancel_job",
    "update_job_status",
]
