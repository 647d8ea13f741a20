"""Builders that turn domain events into notifications."""

from __future__ import annotations

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    NOTIFICATION_TYPE_DRIVER_INVITATION,
    NOTIFICATION_TYPE_JOB_ACCEPTED,
    NOTIFICATION_TYPE_JOB_APPLICATION,
    NOTIFICATION_TYPE_JOB_REJECTED,
    NOTIFICATION_TYPE_JOB_STATUS,
    NOTIFICATION_TYPE_MESSAGE,
    NOTIFICATION_TYPE_PAYMENT,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPE_VERIFICATION,
    PRIORITY_HIGH,
    PRIORITY_NORMAL,
    JobApplication,
)

from .store import create_notification

JOB_STATUS_MESSAGES = {
    "picked_up": "Your cargo has been picked up",
    "in_transit": "Your cargo is on the way",
    "delivered": "Your cargo has been delivered",
    "delayed": "Your delivery has been delayed",
}
JOB_STATUS_FALLBACK_MESSAGE = "Status updated"


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(float(amount))


async def notify_new_job_application(
    context: ServiceContext, cargo_owner_id: str, application: JobApplication
) -> str:
    """Tell the cargo owner that a driver applied for one of their jobs."""

    return await create_notification(
        context,
        cargo_owner_id,
        title="New Job Application",
        body=(
            f"{application.driver_info.name} applied for your job: "
            f"{application.job_info.title}"
        ),
        type=NOTIFICATION_TYPE_JOB_APPLICATION,
        data={
            "application_id": application.id,
            "job_id": application.job_id,
            "driver_id": application.driver_id,
            "bid_amount": application.bid_amount,
        },
        priority=PRIORITY_HIGH,
    )


async def notify_job_accepted(
    context: ServiceContext,
    driver_id: str,
    *,
    job_id: str,
    job_title: str,
    application_id: str,
) -> str:
    """Tell a driver their application won the job."""

    return await create_notification(
        context,
        driver_id,
        title="Job Application Accepted! 🎉",
        body=f'Congratulations! Your application for "{job_title}" has been accepted.',
        type=NOTIFICATION_TYPE_JOB_ACCEPTED,
        data={"job_id": job_id, "application_id": application_id},
        priority=PRIORITY_HIGH,
    )


async def notify_job_rejected(
    context: ServiceContext,
    driver_id: str,
    *,
    job_id: str,
    job_title: str,
    application_id: str,
    reason: str = "",
) -> str:
    """Tell a driver their application was not selected."""

    return await create_notification(
        context,
        driver_id,
        title="Job Application Update",
        body=f'Your application for "{job_title}" was not selected. {reason}',
        type=NOTIFICATION_TYPE_JOB_REJECTED,
        data={"job_id": job_id, "application_id": application_id, "reason": reason},
        priority=PRIORITY_NORMAL,
    )


async def notify_job_status_update(
    context: ServiceContext, user_id: str, job_title: str, new_status: str
) -> str:
    """Tell the cargo owner where their shipment is."""

    message = JOB_STATUS_MESSAGES.get(new_status, JOB_STATUS_FALLBACK_MESSAGE)
    return await create_notification(
        context,
        user_id,
        title="Shipment Update",
        body=f"{job_title}: {message}",
        type=NOTIFICATION_TYPE_JOB_STATUS,
        data={"status": new_status, "job_title": job_title},
        priority=PRIORITY_HIGH if new_status == "delivered" else PRIORITY_NORMAL,
    )


async def notify_payment_received(
    context: ServiceContext, user_id: str, amount: float, job_title: str
) -> str:
    """Tell a driver they were paid for a delivery."""

    return await create_notification(
        context,
        user_id,
        title="Payment Received 💰",
        body=f'You received ${_format_amount(amount)} for delivering "{job_title}"',
        type=NOTIFICATION_TYPE_PAYMENT,
        data={"amount": amount, "job_title": job_title},
        priority=PRIORITY_HIGH,
    )


async def notify_new_message(
    context: ServiceContext,
    user_id: str,
    sender_name: str,
    preview: str,
    conversation_id: str,
) -> str:
    """Tell a user a new chat message arrived."""

    return await create_notification(
        context,
        user_id,
        title=f"New message from {sender_name}",
        body=preview,
        type=NOTIFICATION_TYPE_MESSAGE,
        data={"conversation_id": conversation_id, "sender_name": sender_name},
        priority=PRIORITY_NORMAL,
    )


async def notify_driver_invitation(
    context: ServiceContext,
    driver_id: str,
    *,
    job_id: str,
    job_title: str,
    cargo_owner_name: str,
) -> str:
    """Tell a driver a cargo owner invited them to apply."""

    return await create_notification(
        context,
        driver_id,
        title="Job Invitation Received! 📩",
        body=f'{cargo_owner_name} invited you to apply for "{job_title}"',
        type=NOTIFICATION_TYPE_DRIVER_INVITATION,
        data={"job_id": job_id, "cargo_owner_name": cargo_owner_name},
        priority=PRIORITY_HIGH,
    )


async def notify_system_maintenance(context: ServiceContext, user_id: str, message: str) -> str:
    """Warn a user about planned maintenance."""

    return await create_notification(
        context,
        user_id,
        title="System Maintenance",
        body=message,
        type=NOTIFICATION_TYPE_SYSTEM,
        data={},
        priority=PRIORITY_NORMAL,
    )


async def notify_account_verification(
    context: ServiceContext, user_id: str, status: str
) -> str:
    """Tell a user about the outcome of their account verification."""

    approved = status == "approved"
    return await create_notification(
        context,
        user_id,
        title="Account Verified ✅" if approved else "Account Verification Update",
        body=(
            "Your account has been verified! You can now access all features."
            if approved
            else "Your account verification requires additional information."
        ),
        type=NOTIFICATION_TYPE_VERIFICATION,
        data={"status": status},
        priority=PRIORITY_HIGH,
    )


__all__ = [
    "JOB_STATUS_MESSAGES",
    "JOB_STATUS_FALLBACK_MESSAGE",
    "notify_new_job_application",
    "notify_job_accepted",
    "notify_job_rejected",
    "notify_job_status_update",
    "notify_payment_received",
    "notify_new_message",
    "notify_driver_invitation",
    "notify_system_maintenance",
    "notify_account_verification",
]
