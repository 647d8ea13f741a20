"""Use cases reading and mutating notification records."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    PRIORITY_NORMAL,
    Notification,
)
from cargomatch.domain.errors import DomainError, ValidationError
from cargomatch.infrastructure.repositories import NotificationRepository
from cargomatch.utils import now_utc

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


@dataclass(frozen=True)
class BulkSendReport:
    """Outcome of sending one notification to several users."""

    sent: int
    failed: int
    total: int


@dataclass(frozen=True)
class NotificationAnalytics:
    """Read statistics for a user's recent notifications."""

    total: int
    read: int
    unread: int
    read_rate: int
    by_type: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)


async def create_notification(
    context: ServiceContext,
    recipient_id: str,
    *,
    title: str,
    body: str,
    type: str,
    data: Mapping[str, Any] | None = None,
    priority: str = PRIORITY_NORMAL,
) -> str:
    """Persist an unread notification for ``recipient_id`` and return its id.

    Unknown types or priorities are stored as given; consumers render them
    with a generic fallback.
    """

    if not recipient_id:
        raise ValidationError("A notification recipient is required")
    if type not in NOTIFICATION_TYPES:
        logger.warning("Notification type '%s' is not a known type", type)
    if priority not in NOTIFICATION_PRIORITIES:
        logger.warning("Notification priority '%s' is not a known priority", priority)

    return await NotificationRepository(context.store).create(
        recipient_id=recipient_id,
        title=title,
        body=body,
        type=type,
        data=data,
        priority=priority or PRIORITY_NORMAL,
    )


async def list_for_user(
    context: ServiceContext,
    user_id: str | None = None,
    *,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[Notification]:
    """Return the user's notifications, newest first."""

    user_id = context.resolve_user_id(user_id)
    return await NotificationRepository(context.store).list_for_user(user_id, limit=limit)


async def subscribe_to_notifications(
    context: ServiceContext,
    user_id: str,
    callback: Callable[[list[Notification]], Any],
    *,
    limit: int | None = None,
) -> Callable[[], None]:
    """Push the user's most recent notifications to ``callback`` on every change."""

    return await NotificationRepository(context.store).subscribe(
        user_id,
        callback,
        limit=limit or context.settings.notification_feed_limit,
    )


async def mark_read(context: ServiceContext, notification_id: str) -> None:
    """Flag a single notification as read."""

    await NotificationRepository(context.store).mark_as_read(notification_id)


async def mark_all_read(context: ServiceContext, user_id: str | None = None) -> int:
    """Flag every unread notification of the user as read and return how many."""

    user_id = context.resolve_user_id(user_id)
    marked = await NotificationRepository(context.store).mark_all_as_read(user_id)
    logger.info("Marked %s notifications as read for user %s", marked, user_id)
    return marked


async def unread_count(context: ServiceContext, user_id: str | None = None) -> int:
    """Return how many notifications of the user are still unread."""

    user_id = context.resolve_user_id(user_id)
    return await NotificationRepository(context.store).count_unread(user_id)


async def send_bulk_notification(
    context: ServiceContext,
    user_ids: Iterable[str],
    *,
    title: str,
    body: str,
    type: str,
    data: Mapping[str, Any] | None = None,
    priority: str = PRIORITY_NORMAL,
) -> BulkSendReport:
    """Send the same notification to each user; one failure does not stop the rest."""

    recipients = list(user_ids)
    sent = 0
    failed = 0
    for recipient_id in recipients:
        try:
            await create_notification(
                context,
                recipient_id,
                title=title,
                body=body,
                type=type,
                data=data,
                priority=priority,
            )
        except DomainError as exc:
            failed += 1
            logger.warning("Bulk notification to %s failed: %s", recipient_id, exc.message)
        else:
            sent += 1
    return BulkSendReport(sent=sent, failed=failed, total=len(recipients))


async def get_notification_analytics(
    context: ServiceContext,
    user_id: str,
    *,
    days: int = 30,
) -> NotificationAnalytics:
    """Summarize the notifications the user received during the last ``days`` days."""

    since = now_utc() - timedelta(days=days)
    notifications = await NotificationRepository(context.store).list_for_user(
        user_id, limit=None, since=since
    )
    total = len(notifications)
    read = sum(1 for notification in notifications if notification.read)
    return NotificationAnalytics(
        total=total,
        read=read,
        unread=total - read,
        read_rate=round(read / total * 100) if total else 0,
        by_type=dict(Counter(notification.type for notification in notifications)),
        by_priority=dict(Counter(notification.priority for notification in notifications)),
    )


__all__ = [
    "BulkSendReport",
    "NotificationAnalytics",
    "create_notification",
    "list_for_user",
    "subscribe_to_notifications",
    "mark_read",
    "mark_all_read",
    "unread_count",
    "send_bulk_notification",
    "get_notification_analytics",
]
