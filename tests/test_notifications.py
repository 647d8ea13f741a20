"""Tests for the notification store and the event helpers."""

from __future__ import annotations

import pytest

from cargomatch.application.context import ServiceContext
from cargomatch.application.use_cases.notifications import (
    create_notification,
    dispatch_safely,
    get_notification_analytics,
    list_for_user,
    mark_all_read,
    mark_read,
    notify_account_verification,
    notify_driver_invitation,
    notify_job_status_update,
    notify_new_message,
    notify_payment_received,
    notify_system_maintenance,
    send_bulk_notification,
    subscribe_to_notifications,
    unread_count,
)
from cargomatch.domain.errors import NotFoundError, PersistenceError, ValidationError
from cargomatch.infrastructure.repositories import NotificationRepository

pytestmark = pytest.mark.anyio


async def _create(context: ServiceContext, user_id: str = "user-1", **overrides) -> str:
    values = {"title": "Hello", "body": "World", "type": "system"}
    values.update(overrides)
    return await create_notification(context, user_id, **values)


async def test_create_notification_defaults(context: ServiceContext) -> None:
    notification_id = await _create(context, data={"job_id": "job-1"})

    notification = await NotificationRepository(context.store).get(notification_id)
    assert notification.read is False
    assert notification.read_at is None
    assert notification.priority == "normal"
    assert notification.data == {"job_id": "job-1"}
    assert notification.created_at is not None


async def test_unknown_type_is_stored_with_a_warning(
    context: ServiceContext, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING"):
        notification_id = await _create(context, type="promotion", priority="whenever")

    notification = await NotificationRepository(context.store).get(notification_id)
    assert notification.type == "promotion"
    assert notification.priority == "whenever"
    assert "is not a known type" in caplog.text
    assert "is not a known priority" in caplog.text


async def test_create_notification_requires_recipient(context: ServiceContext) -> None:
    with pytest.raises(ValidationError):
        await _create(context, user_id="")


async def test_list_is_newest_first_and_limited(context: ServiceContext) -> None:
    for index in range(3):
        await _create(context, title=f"n{index}")
    await _create(context, user_id="someone-else")

    notifications = await list_for_user(context, "user-1", limit=2)

    assert [notification.title for notification in notifications] == ["n2", "n1"]


async def test_mark_read_and_unread_count(context: ServiceContext) -> None:
    first = await _create(context)
    await _create(context)

    await mark_read(context, first)

    assert await unread_count(context, "user-1") == 1
    notification = await NotificationRepository(context.store).get(first)
    assert notification.read is True
    assert notification.read_at is not None
    with pytest.raises(NotFoundError):
        await mark_read(context, "missing")


async def test_mark_all_read_marks_every_existing_notification(context: ServiceContext) -> None:
    for _ in range(4):
        await _create(context)
    await _create(context, user_id="someone-else")

    marked = await mark_all_read(context, "user-1")

    assert marked == 4
    assert await unread_count(context, "user-1") == 0
    assert await unread_count(context, "someone-else") == 1
    assert await mark_all_read(context, "user-1") == 0


async def test_live_feed_tracks_changes(context: ServiceContext) -> None:
    feeds: list[list[bool]] = []
    unsubscribe = await subscribe_to_notifications(
        context, "user-1", lambda items: feeds.append([item.read for item in items]), limit=2
    )

    first = await _create(context)
    await mark_read(context, first)
    unsubscribe()

    assert feeds == [[], [False], [True]]


async def test_status_update_bodies_and_priorities(context: ServiceContext) -> None:
    await notify_job_status_update(context, "owner-1", "Pallets", "picked_up")
    await notify_job_status_update(context, "owner-1", "Pallets", "delayed")
    await notify_job_status_update(context, "owner-1", "Pallets", "delivered")
    await notify_job_status_update(context, "owner-1", "Pallets", "lost")

    notifications = await list_for_user(context, "owner-1")

    assert [(n.body, n.priority) for n in notifications] == [
        ("Pallets: Status updated", "normal"),
        ("Pallets: Your cargo has been delivered", "high"),
        ("Pallets: Your delivery has been delayed", "normal"),
        ("Pallets: Your cargo has been picked up", "normal"),
    ]
    assert {n.title for n in notifications} == {"Shipment Update"}


async def test_event_helpers_use_expected_texts(context: ServiceContext) -> None:
    await notify_payment_received(context, "driver-a", 1250.5, "Pallets")
    await notify_new_message(context, "driver-a", "Sam", "Are you close?", "conv-1")
    await notify_driver_invitation(
        context, "driver-a", job_id="job-1", job_title="Pallets", cargo_owner_name="Acme"
    )
    await notify_system_maintenance(context, "driver-a", "Back at 2am")
    await notify_account_verification(context, "driver-a", "approved")
    await notify_account_verification(context, "driver-a", "pending")

    by_type = {}
    for notification in await list_for_user(context, "driver-a"):
        by_type.setdefault(notification.type, []).append(notification)

    payment = by_type["payment"][0]
    assert payment.title == "Payment Received 💰"
    assert payment.body == 'You received $1250.5 for delivering "Pallets"'
    assert payment.data == {"amount": 1250.5, "job_title": "Pallets"}
    assert by_type["message"][0].title == "New message from Sam"
    invitation = by_type["driver_invitation"][0]
    assert invitation.body == 'Acme invited you to apply for "Pallets"'
    assert invitation.priority == "high"
    assert by_type["system"][0].body == "Back at 2am"
    titles = [notification.title for notification in by_type["verification"]]
    assert titles == ["Account Verification Update", "Account Verified ✅"]


async def test_bulk_send_counts_failures(context: ServiceContext) -> None:
    report = await send_bulk_notification(
        context, ["user-1", "", "user-2"], title="Hi", body="All", type="system"
    )

    assert (report.sent, report.failed, report.total) == (2, 1, 3)
    assert await unread_count(context, "user-2") == 1


async def test_notification_analytics(context: ServiceContext) -> None:
    first = await _create(context, type="payment", priority="high")
    await _create(context, type="system")
    await _create(context, type="system")
    await mark_read(context, first)

    analytics = await get_notification_analytics(context, "user-1", days=30)

    assert (analytics.total, analytics.read, analytics.unread) == (3, 1, 2)
    assert analytics.read_rate == 33
    assert analytics.by_type == {"system": 2, "payment": 1}
    assert analytics.by_priority == {"normal": 2, "high": 1}


async def test_dispatch_safely_logs_and_swallows_domain_errors(
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def failing() -> str:
        raise PersistenceError("store offline")

    with caplog.at_level("ERROR"):
        result = await dispatch_safely(failing(), description="test")

    assert result is None
    assert "Could not send test notification" in caplog.text


async def test_dispatch_safely_swallows_unexpected_errors(
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def broken() -> str:
        raise RuntimeError("renderer crashed")

    with caplog.at_level("ERROR"):
        result = await dispatch_safely(broken(), description="payment")

    assert result is None
    assert "Could not send payment notification" in caplog.text
    assert "renderer crashed" in caplog.text
