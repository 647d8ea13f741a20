"""Tests for submitting, accepting, rejecting and completing applications."""

from __future__ import annotations

import pytest

from cargomatch.application.context import ServiceContext
from cargomatch.application.use_cases.applications import (
    ANOTHER_DRIVER_SELECTED,
    accept_application,
    complete_job,
    get_driver_applications,
    get_job_applications,
    recompute_rating,
    reject_application,
    submit_application,
    subscribe_to_job_applications,
)
from cargomatch.application.use_cases.jobs import cancel_job
from cargomatch.application.use_cases.notifications import events as notification_events
from cargomatch.domain.entities import Vehicle
from cargomatch.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from cargomatch.infrastructure.repositories import (
    ApplicationRepository,
    DriverRepository,
    JobRepository,
    NotificationRepository,
)

pytestmark = pytest.mark.anyio


async def _notifications_of_type(context: ServiceContext, user_id: str, type: str) -> list:
    notifications = await NotificationRepository(context.store).list_for_user(user_id, limit=None)
    return [notification for notification in notifications if notification.type == type]


async def test_submit_application_snapshots_job_and_driver(
    context: ServiceContext, make_job, make_driver
) -> None:
    job = await make_job()
    await make_driver(id="driver-a", rating=4.8, completed_jobs=12)

    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=450, message="Ready today"
    )

    application = await ApplicationRepository(context.store).get(application_id)
    assert application.status == "pending"
    assert application.cargo_owner_id == job.owner_id
    assert application.bid_amount == 450.0
    assert application.job_info.title == "Electronics to Detroit"
    assert application.job_info.pickup_location == "123 Main St, Chicago, USA"
    assert application.driver_info.name == "Alex Driver"
    assert application.driver_info.rating == 4.8
    assert application.driver_info.vehicle_type == "Box Truck"
    assert application.submitted_at is not None

    updated_job = await JobRepository(context.store).get(job.id)
    assert updated_job.application_count == 1

    owner_notifications = await _notifications_of_type(context, job.owner_id, "job_application")
    assert len(owner_notifications) == 1
    assert owner_notifications[0].body == "Alex Driver applied for your job: Electronics to Detroit"
    assert owner_notifications[0].priority == "high"


async def test_submit_application_defaults_missing_driver_fields(
    context: ServiceContext, make_job, make_driver
) -> None:
    job = await make_job()
    await make_driver(id="driver-b", rating=None, completed_jobs=0, vehicle=Vehicle())

    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-b", bid_amount=300
    )

    snapshot = (await ApplicationRepository(context.store).get(application_id)).driver_info
    assert snapshot.rating == 4.5
    assert snapshot.completed_jobs == 0
    assert snapshot.vehicle_type == "Unknown"


async def test_submit_application_uses_the_session_user(
    context: ServiceContext, make_job
) -> None:
    job = await make_job()

    application_id = await submit_application(context, job_id=job.id, bid_amount=200)

    application = await ApplicationRepository(context.store).get(application_id)
    assert application.driver_id == "owner-1"
    assert application.driver_info.name == "Unknown driver"


async def test_submit_application_to_missing_job_writes_nothing(
    context: ServiceContext,
) -> None:
    with pytest.raises(NotFoundError):
        await submit_application(context, job_id="missing", driver_id="driver-a", bid_amount=100)

    assert await ApplicationRepository(context.store).list() == []


@pytest.mark.parametrize("bid", [0, -5, float("nan"), float("inf"), "abc", None, True])
async def test_submit_application_rejects_invalid_bids(
    context: ServiceContext, make_job, bid
) -> None:
    job = await make_job()

    with pytest.raises(ValidationError):
        await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=bid)


async def test_duplicate_applications_follow_the_setting(
    context: ServiceContext, make_job
) -> None:
    job = await make_job()
    await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=100)
    await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=90)

    context.settings = context.settings.model_copy(
        update={"allow_duplicate_applications": False}
    )
    with pytest.raises(ConflictError):
        await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=80)

    assert len(await get_job_applications(context, job.id)) == 2


async def test_accept_application_rejects_competitors(
    context: ServiceContext, make_job, make_driver
) -> None:
    job = await make_job()
    await make_driver(id="driver-a")
    await make_driver(id="driver-b", name="Blake Driver")
    losing_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=480
    )
    winning_id = await submit_application(
        context, job_id=job.id, driver_id="driver-b", bid_amount=450
    )

    outcome = await accept_application(context, application_id=winning_id, job_id=job.id)

    applications = ApplicationRepository(context.store)
    winner = await applications.get(winning_id)
    loser = await applications.get(losing_id)
    assert winner.status == "accepted"
    assert winner.decided_at is not None
    assert loser.status == "rejected"
    assert loser.rejection_reason == ANOTHER_DRIVER_SELECTED
    assert [application.id for application in outcome.rejected] == [losing_id]

    assigned = await JobRepository(context.store).get(job.id)
    assert assigned.status == "assigned"
    assert assigned.assigned_application_id == winning_id
    assert assigned.status_history[-1].status == "assigned"

    rejected_notes = await _notifications_of_type(context, "driver-a", "job_rejected")
    assert len(rejected_notes) == 1
    assert rejected_notes[0].priority == "normal"
    assert ANOTHER_DRIVER_SELECTED in rejected_notes[0].body
    accepted_notes = await _notifications_of_type(context, "driver-b", "job_accepted")
    assert len(accepted_notes) == 1
    assert accepted_notes[0].title == "Job Application Accepted! 🎉"
    assert await _notifications_of_type(context, "driver-b", "job_rejected") == []


async def test_accept_application_guards(context: ServiceContext, make_job) -> None:
    job = await make_job()
    other_job = await make_job(title="Other")
    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=100
    )

    with pytest.raises(NotFoundError):
        await accept_application(context, application_id="missing", job_id=job.id)
    with pytest.raises(ValidationError):
        await accept_application(context, application_id=application_id, job_id=other_job.id)

    await accept_application(context, application_id=application_id, job_id=job.id)
    with pytest.raises(ConflictError):
        await accept_application(context, application_id=application_id, job_id=job.id)


async def test_accept_application_requires_a_pending_job(
    context: ServiceContext, make_job
) -> None:
    job = await make_job(status="assigned")
    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=100
    )

    with pytest.raises(ConflictError):
        await accept_application(context, application_id=application_id, job_id=job.id)

    assert (await ApplicationRepository(context.store).get(application_id)).status == "pending"


async def test_reject_application_notifies_with_owner_reason(
    context: ServiceContext, make_job
) -> None:
    job = await make_job()
    first = await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=100)
    second = await submit_application(context, job_id=job.id, driver_id="driver-b", bid_amount=90)

    await reject_application(context, application_id=first, reason="Budget too high")

    applications = ApplicationRepository(context.store)
    assert (await applications.get(first)).status == "rejected"
    assert (await applications.get(first)).rejection_reason == "Budget too high"
    assert (await applications.get(second)).status == "pending"
    notes = await _notifications_of_type(context, "driver-a", "job_rejected")
    assert notes[0].body == 'Your application for "Electronics to Detroit" was not selected. Budget too high'

    with pytest.raises(ConflictError):
        await reject_application(context, application_id=first)


async def test_complete_job_updates_statistics_once(
    context: ServiceContext, make_job, make_driver
) -> None:
    job = await make_job()
    await make_driver(id="driver-a", rating=4.0, completed_jobs=2, total_earnings=1000.0)
    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=450
    )
    await accept_application(context, application_id=application_id, job_id=job.id)

    await complete_job(context, application_id=application_id, rating=5)

    driver = await DriverRepository(context.store).get("driver-a")
    assert driver.completed_jobs == 3
    assert driver.total_earnings == 1450.0
    assert driver.rating == (4.0 * 2 + 5) / 3
    assert driver.last_job_completed_at is not None

    application = await ApplicationRepository(context.store).get(application_id)
    assert application.status == "completed"
    assert application.final_amount == 450.0
    assert application.owner_rating == 5.0
    delivered = await JobRepository(context.store).get(job.id)
    assert delivered.status == "delivered"
    assert delivered.completed_application_id == application_id
    assert delivered.delivered_at is not None

    payments = await _notifications_of_type(context, "driver-a", "payment")
    assert payments[0].body == 'You received $450 for delivering "Electronics to Detroit"'
    updates = await _notifications_of_type(context, job.owner_id, "job_status")
    assert updates[0].body == "Electronics to Detroit: Your cargo has been delivered"
    assert updates[0].priority == "high"

    with pytest.raises(ConflictError):
        await complete_job(context, application_id=application_id, rating=5)
    driver = await DriverRepository(context.store).get("driver-a")
    assert driver.completed_jobs == 3
    assert driver.total_earnings == 1450.0


async def test_complete_job_requires_an_accepted_application(
    context: ServiceContext, make_job
) -> None:
    job = await make_job()
    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=100
    )

    with pytest.raises(ConflictError):
        await complete_job(context, application_id=application_id)
    with pytest.raises(ValidationError):
        await complete_job(context, application_id=application_id, rating=6)


def test_recompute_rating_counts_missing_rating_as_default() -> None:
    assert recompute_rating(4.0, 3, 5) == (4.0 * 2 + 5) / 3
    assert recompute_rating(None, 2, 3) == (4.5 + 3) / 2
    assert recompute_rating(None, 1, 3) == 3


async def test_driver_applications_and_live_job_feed(
    context: ServiceContext, make_job
) -> None:
    job = await make_job()
    snapshots: list[list[str]] = []
    unsubscribe = await subscribe_to_job_applications(
        context, job.id, lambda items: snapshots.append([item.status for item in items])
    )

    first = await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=100)
    await reject_application(context, application_id=first)
    unsubscribe()

    assert snapshots == [[], ["pending"], ["rejected"]]
    mine = await get_driver_applications(context, "driver-a")
    assert [application.id for application in mine] == [first]


async def test_complete_job_refuses_a_cancelled_job(
    context: ServiceContext, make_job, make_driver
) -> None:
    job = await make_job()
    await make_driver(id="driver-a", completed_jobs=2, total_earnings=1000.0)
    application_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=450
    )
    await accept_application(context, application_id=application_id, job_id=job.id)
    await cancel_job(context, job_id=job.id)

    with pytest.raises(ConflictError):
        await complete_job(context, application_id=application_id, rating=5)

    assert (await JobRepository(context.store).get(job.id)).status == "cancelled"
    assert (await ApplicationRepository(context.store).get(application_id)).status == "accepted"
    driver = await DriverRepository(context.store).get("driver-a")
    assert (driver.completed_jobs, driver.total_earnings) == (2, 1000.0)
    assert await _notifications_of_type(context, "driver-a", "payment") == []


async def test_failed_notifications_keep_the_acceptance(
    context: ServiceContext,
    make_job,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    job = await make_job()
    winning_id = await submit_application(
        context, job_id=job.id, driver_id="driver-a", bid_amount=400
    )
    losing_id = await submit_application(
        context, job_id=job.id, driver_id="driver-b", bid_amount=420
    )

    async def unavailable(*args, **kwargs) -> str:
        raise PersistenceError("notification store offline")

    monkeypatch.setattr(notification_events, "create_notification", unavailable)
    with caplog.at_level("ERROR"):
        outcome = await accept_application(context, application_id=winning_id, job_id=job.id)

    assert [application.id for application in outcome.rejected] == [losing_id]
    applications = ApplicationRepository(context.store)
    assert (await applications.get(winning_id)).status == "accepted"
    assert (await applications.get(losing_id)).status == "rejected"
    assert (await JobRepository(context.store).get(job.id)).status == "assigned"
    assert "Could not send job accepted notification" in caplog.text
    assert "Could not send job rejected notification" in caplog.text
