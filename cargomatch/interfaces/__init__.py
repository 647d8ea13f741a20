"""Boundary between the core and the screens that render it."""

from .results import ErrorInfo, OperationResult
from .services import DashboardIntegrationService, JobMatchingService, NotificationService

__all__ = [
    "DashboardIntegrationService",
    "ErrorInfo",
    "JobMatchingService",
    "NotificationService",
    "OperationResult",
]
