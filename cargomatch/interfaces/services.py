"""Facades consumed by the UI layer.

Every method returns an :class:`OperationResult` instead of raising, so
screens can branch on ``result.ok`` and show ``result.error.message``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.application.use_cases import applications, dashboard, invitations, jobs
from cargomatch.application.use_cases import matching, notifications
from cargomatch.application.use_cases.dashboard.aggregator import DashboardCallback
from cargomatch.domain.entities import PRIORITY_NORMAL, JobApplication
from cargomatch.domain.errors import DomainError

from .results import OperationResult

logger = logging.getLogger(__name__)


async def _guard(operation: str, call: Awaitable[Any]) -> OperationResult:
    try:
        value = await call
    except DomainError as exc:
        logger.warning("%s failed (%s): %s", operation, exc.kind, exc.message)
        return OperationResult.failure(exc)
    return OperationResult.success(value)


class JobMatchingService:
    """Bidding workflow: applications, recommendations and invitations."""

    def __init__(self, context: ServiceContext) -> None:
        self.context = context

    async def submit_application(
        self,
        *,
        job_id: str,
        bid_amount: Any,
        message: str = "",
        driver_id: str | None = None,
    ) -> OperationResult:
        return await _guard(
            "submit_application",
            applications.submit_application(
                self.context,
                job_id=job_id,
                driver_id=driver_id,
                bid_amount=bid_amount,
                message=message,
            ),
        )

    async def accept_application(self, application_id: str, job_id: str) -> OperationResult:
        return await _guard(
            "accept_application",
            applications.accept_application(
                self.context, application_id=application_id, job_id=job_id
            ),
        )

    async def reject_application(self, application_id: str, reason: str = "") -> OperationResult:
        return await _guard(
            "reject_application",
            applications.reject_application(
                self.context, application_id=application_id, reason=reason
            ),
        )

    async def get_job_applications(self, job_id: str) -> OperationResult:
        return await _guard(
            "get_job_applications", applications.get_job_applications(self.context, job_id)
        )

    async def get_driver_applications(self, driver_id: str | None = None) -> OperationResult:
        return await _guard(
            "get_driver_applications",
            applications.get_driver_applications(self.context, driver_id),
        )

    async def subscribe_to_job_applications(
        self, job_id: str, callback: Callable[[list[JobApplication]], Any]
    ) -> OperationResult:
        return await _guard(
            "subscribe_to_job_applications",
            applications.subscribe_to_job_applications(self.context, job_id, callback),
        )

    async def subscribe_to_driver_applications(
        self, driver_id: str, callback: Callable[[list[JobApplication]], Any]
    ) -> OperationResult:
        return await _guard(
            "subscribe_to_driver_applications",
            applications.subscribe_to_driver_applications(self.context, driver_id, callback),
        )

    async def get_recommended_drivers(self, job_id: str) -> OperationResult:
        return await _guard(
            "get_recommended_drivers", matching.get_recommended_drivers(self.context, job_id)
        )

    async def update_job_status(self, job_id: str, status: str, note: str = "") -> OperationResult:
        return await _guard(
            "update_job_status",
            jobs.update_job_status(self.context, job_id=job_id, status=status, note=note),
        )

    async def cancel_job(self, job_id: str, note: str = "") -> OperationResult:
        return await _guard(
            "cancel_job", jobs.cancel_job(self.context, job_id=job_id, note=note)
        )

    async def invite_driver(
        self,
        job_id: str,
        driver_id: str,
        message: str = "",
        *,
        cargo_owner_name: str | None = None,
    ) -> OperationResult:
        return await _guard(
            "invite_driver",
            invitations.invite_driver(
                self.context,
                job_id=job_id,
                driver_id=driver_id,
                message=message,
                cargo_owner_name=cargo_owner_name,
            ),
        )

    async def get_driver_invitations(self, driver_id: str | None = None) -> OperationResult:
        return await _guard(
            "get_driver_invitations",
            invitations.get_driver_invitations(self.context, driver_id),
        )


class NotificationService:
    """Notification feed plus the helpers announcing domain events."""

    def __init__(self, context: ServiceContext) -> None:
        self.context = context

    async def create_notification(
        self,
        recipient_id: str,
        *,
        title: str,
        body: str,
        type: str,
        data: Mapping[str, Any] | None = None,
        priority: str = PRIORITY_NORMAL,
    ) -> OperationResult:
        return await _guard(
            "create_notification",
            notifications.create_notification(
                self.context,
                recipient_id,
                title=title,
                body=body,
                type=type,
                data=data,
                priority=priority,
            ),
        )

    async def get_user_notifications(
        self, user_id: str | None = None, limit: int = 50
    ) -> OperationResult:
        return await _guard(
            "get_user_notifications",
            notifications.list_for_user(self.context, user_id, limit=limit),
        )

    async def subscribe_to_notifications(
        self, user_id: str, callback: Callable[[list[Any]], Any], limit: int | None = None
    ) -> OperationResult:
        return await _guard(
            "subscribe_to_notifications",
            notifications.subscribe_to_notifications(
                self.context, user_id, callback, limit=limit
            ),
        )

    async def mark_as_read(self, notification_id: str) -> OperationResult:
        return await _guard("mark_as_read", notifications.mark_read(self.context, notification_id))

    async def mark_all_as_read(self, user_id: str | None = None) -> OperationResult:
        return await _guard(
            "mark_all_as_read", notifications.mark_all_read(self.context, user_id)
        )

    async def get_unread_count(self, user_id: str | None = None) -> OperationResult:
        return await _guard(
            "get_unread_count", notifications.unread_count(self.context, user_id)
        )

    async def send_bulk_notification(
        self,
        user_ids: Iterable[str],
        *,
        title: str,
        body: str,
        type: str,
        data: Mapping[str, Any] | None = None,
        priority: str = PRIORITY_NORMAL,
    ) -> OperationResult:
        return await _guard(
            "send_bulk_notification",
            notifications.send_bulk_notification(
                self.context,
                user_ids,
                title=title,
                body=body,
                type=type,
                data=data,
                priority=priority,
            ),
        )

    async def get_notification_analytics(self, user_id: str, days: int = 30) -> OperationResult:
        return await _guard(
            "get_notification_analytics",
            notifications.get_notification_analytics(self.context, user_id, days=days),
        )

    async def notify_new_job_application(
        self, cargo_owner_id: str, application: JobApplication
    ) -> OperationResult:
        return await _guard(
            "notify_new_job_application",
            notifications.notify_new_job_application(self.context, cargo_owner_id, application),
        )

    async def notify_job_accepted(
        self, driver_id: str, *, job_id: str, job_title: str, application_id: str
    ) -> OperationResult:
        return await _guard(
            "notify_job_accepted",
            notifications.notify_job_accepted(
                self.context,
                driver_id,
                job_id=job_id,
                job_title=job_title,
                application_id=application_id,
            ),
        )

    async def notify_job_rejected(
        self,
        driver_id: str,
        *,
        job_id: str,
        job_title: str,
        application_id: str,
        reason: str = "",
    ) -> OperationResult:
        return await _guard(
            "notify_job_rejected",
            notifications.notify_job_rejected(
                self.context,
                driver_id,
                job_id=job_id,
                job_title=job_title,
                application_id=application_id,
                reason=reason,
            ),
        )

    async def notify_driver_invitation(
        self, driver_id: str, *, job_id: str, job_title: str, cargo_owner_name: str
    ) -> OperationResult:
        return await _guard(
            "notify_driver_invitation",
            notifications.notify_driver_invitation(
                self.context,
                driver_id,
                job_id=job_id,
                job_title=job_title,
                cargo_owner_name=cargo_owner_name,
            ),
        )

    async def notify_job_status_update(
        self, user_id: str, job_title: str, new_status: str
    ) -> OperationResult:
        return await _guard(
            "notify_job_status_update",
            notifications.notify_job_status_update(self.context, user_id, job_title, new_status),
        )

    async def notify_payment_received(
        self, user_id: str, amount: float, job_title: str
    ) -> OperationResult:
        return await _guard(
            "notify_payment_received",
            notifications.notify_payment_received(self.context, user_id, amount, job_title),
        )

    async def notify_new_message(
        self, user_id: str, sender_name: str, preview: str, conversation_id: str
    ) -> OperationResult:
        return await _guard(
            "notify_new_message",
            notifications.notify_new_message(
                self.context, user_id, sender_name, preview, conversation_id
            ),
        )

    async def notify_system_maintenance(self, user_id: str, message: str) -> OperationResult:
        return await _guard(
            "notify_system_maintenance",
            notifications.notify_system_maintenance(self.context, user_id, message),
        )

    async def notify_account_verification(self, user_id: str, status: str) -> OperationResult:
        return await _guard(
            "notify_account_verification",
            notifications.notify_account_verification(self.context, user_id, status),
        )


class DashboardIntegrationService:
    """Live dashboards, completion processing and analytics."""

    def __init__(self, context: ServiceContext) -> None:
        self.context = context

    async def subscribe_to_cargo_dashboard(
        self, owner_id: str, callback: DashboardCallback
    ) -> OperationResult:
        return await _guard(
            "subscribe_to_cargo_dashboard",
            dashboard.subscribe_to_cargo_dashboard(self.context, owner_id, callback),
        )

    async def subscribe_to_driver_dashboard(
        self, driver_id: str, callback: DashboardCallback
    ) -> OperationResult:
        return await _guard(
            "subscribe_to_driver_dashboard",
            dashboard.subscribe_to_driver_dashboard(self.context, driver_id, callback),
        )

    async def get_recommended_jobs_for_driver(self, driver_id: str) -> OperationResult:
        return await _guard(
            "get_recommended_jobs_for_driver",
            matching.get_recommended_jobs_for_driver(self.context, driver_id),
        )

    async def get_cargo_owner_applications_summary(
        self, owner_id: str | None = None
    ) -> OperationResult:
        return await _guard(
            "get_cargo_owner_applications_summary",
            dashboard.get_cargo_owner_applications_summary(self.context, owner_id),
        )

    async def process_job_completion(self, application_id: str, rating: Any = 5) -> OperationResult:
        return await _guard(
            "process_job_completion",
            applications.complete_job(
                self.context, application_id=application_id, rating=rating
            ),
        )

    async def get_market_insights(self, owner_id: str) -> OperationResult:
        return await _guard(
            "get_market_insights", dashboard.get_market_insights(self.context, owner_id)
        )

    async def get_driver_analytics(self, driver_id: str | None = None) -> OperationResult:
        return await _guard(
            "get_driver_analytics", dashboard.get_driver_analytics(self.context, driver_id)
        )


__all__ = ["DashboardIntegrationService", "JobMatchingService", "NotificationService"]
