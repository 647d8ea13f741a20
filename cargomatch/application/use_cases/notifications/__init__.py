"""Notification store and the helpers emitting domain notifications."""

from .dispatch import dispatch_safely
from .events import (
    JOB_STATUS_FALLBACK_MESSAGE,
    JOB_STATUS_MESSAGES,
    notify_account_verification,
    notify_driver_invitation,
    notify_job_accepted,
    notify_job_rejected,
    notify_job_status_update,
    notify_new_job_application,
    notify_new_message,
    notify_payment_received,
    notify_system_maintenance,
)
from .store import (
    BulkSendReport,
    NotificationAnalytics,
    create_notification,
    get_notification_analytics,
    list_for_user,
    mark_all_read,
    mark_read,
    send_bulk_notification,
    subscribe_to_notifications,
    unread_count,
)

__all__ = [
    "dispatch_safely",
    "JOB_STATUS_FALLBACK_MESSAGE",
    "JOB_STATUS_MESSAGES",
    "notify_account_verification",
    "notify_driver_invitation",
    "notify_job_accepted",
    "notify_job_rejected",
    "notify_job_status_update",
    "notify_new_job_application",
    "notify_new_message",
    "notify_payment_received",
    "notify_system_maintenance",
    "BulkSendReport",
    "NotificationAnalytics",
    "create_notification",
    "get_notification_analytics",
    "list_for_user",
    "mark_all_read",
    "mark_read",
    "send_bulk_notification",
    "subscribe_to_notifications",
    "unread_count",
]
