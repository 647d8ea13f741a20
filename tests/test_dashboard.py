"""Tests for the live dashboards, market insights and driver analytics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cargomatch.application.context import ServiceContext
from cargomatch.application.use_cases.applications import (
    accept_application,
    complete_job,
    submit_application,
)
from cargomatch.application.use_cases.dashboard import (
    DashboardAggregator,
    get_cargo_owner_applications_summary,
    get_driver_analytics,
    get_market_insights,
    subscribe_to_cargo_dashboard,
    subscribe_to_driver_dashboard,
)
from cargomatch.application.use_cases.dashboard.insights import (
    analyze_demand_trends,
    calculate_monthly_trend,
)
from cargomatch.application.use_cases.notifications import create_notification, mark_all_read
from cargomatch.domain.entities import JobApplication, JobPosting, Location
from cargomatch.infrastructure.document_store import SqlDocumentStore

pytestmark = pytest.mark.anyio

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


async def test_aggregator_republishes_merged_immutable_views() -> None:
    views = []
    aggregator = DashboardAggregator(views.append, slices=("a", "b"))
    closed = []
    aggregator.attach(lambda: closed.append("a"))

    await aggregator.publish("a", [1, 2])
    await aggregator.publish("b", ["x"])

    assert [dict(view) for view in views] == [
        {"a": (1, 2), "b": ()},
        {"a": (1, 2), "b": ("x",)},
    ]
    with pytest.raises(TypeError):
        views[-1]["a"] = ()

    aggregator.close()
    await aggregator.publish("a", [3])
    assert closed == ["a"]
    assert len(views) == 2
    assert aggregator.closed is True

    late = []
    aggregator.attach(lambda: late.append("b"))
    assert late == ["b"]


async def test_aggregator_rejects_unknown_slices() -> None:
    aggregator = DashboardAggregator(lambda view: None, slices=("a",))

    with pytest.raises(KeyError):
        await aggregator.publish("zzz", [])


async def test_cargo_dashboard_fans_in_three_feeds(
    context: ServiceContext, store: SqlDocumentStore, make_job
) -> None:
    views = []
    aggregator = await subscribe_to_cargo_dashboard(context, "owner-1", views.append)

    job = await make_job()
    await submit_application(context, job_id=job.id, driver_id="driver-a", bid_amount=400)
    await create_notification(context, "owner-1", title="Hi", body="There", type="system")

    latest = views[-1]
    assert [shipment.id for shipment in latest["shipments"]] == [job.id]
    assert [application.driver_id for application in latest["applications"]] == ["driver-a"]
    # The submission notified the owner as well.
    assert len(latest["notifications"]) == 2

    await mark_all_read(context, "owner-1")
    assert views[-1]["notifications"] == ()

    aggregator.close()
    count = len(views)
    await make_job(title="After close")
    assert len(views) == count
    assert store.listeners.count() == 0


async def test_driver_dashboard_joins_active_jobs(
    context: ServiceContext, store: SqlDocumentStore, make_job
) -> None:
    won = await make_job(title="Won")
    lost = await make_job(title="Lost")
    winning_id = await submit_application(
        context, job_id=won.id, driver_id="driver-a", bid_amount=400
    )
    await submit_application(context, job_id=lost.id, driver_id="driver-a", bid_amount=380)
    views = []

    aggregator = await subscribe_to_driver_dashboard(context, "driver-a", views.append)
    assert views[-1]["active_jobs"] == ()
    assert len(views[-1]["applications"]) == 2

    await accept_application(context, application_id=winning_id, job_id=won.id)

    active = views[-1]["active_jobs"]
    assert [(item.application.id, item.job.title) for item in active] == [(winning_id, "Won")]
    assert views[-1]["notifications"][0].type == "job_accepted"
    aggregator.close()


async def test_driver_dashboard_drops_applications_without_a_job(
    context: ServiceContext, store: SqlDocumentStore
) -> None:
    await store.create(
        "job_applications",
        {"job_id": "ghost", "driver_id": "driver-a", "status": "accepted", "bid_amount": 10},
    )
    views = []

    aggregator = await subscribe_to_driver_dashboard(context, "driver-a", views.append)

    assert views[-1]["active_jobs"] == ()
    assert len(views[-1]["applications"]) == 1
    aggregator.close()


def _job(created_at: datetime, **overrides) -> JobPosting:
    values = {
        "id": None,
        "owner_id": "owner-1",
        "title": "Job",
        "pickup": Location(address="Chicago"),
        "delivery": Location(address="Detroit"),
        "created_at": created_at,
    }
    values.update(overrides)
    return JobPosting(**values)


def test_demand_trend_compares_the_last_two_weeks() -> None:
    jobs = [
        _job(NOW - timedelta(days=1)),
        _job(NOW - timedelta(days=2)),
        _job(NOW - timedelta(days=3)),
        _job(NOW - timedelta(days=8)),
        _job(NOW - timedelta(days=9)),
        _job(NOW - timedelta(days=30)),
        _job(None),
    ]

    trend = analyze_demand_trends(jobs, now=NOW)

    assert (trend.current_week, trend.previous_week) == (3, 2)
    assert trend.trend == "increasing"
    assert trend.percentage == 50
    assert analyze_demand_trends([], now=NOW).trend == "stable"
    assert analyze_demand_trends([_job(NOW)], now=NOW).percentage == 0


async def test_market_insights_recommendations(context: ServiceContext, make_job) -> None:
    await make_job(owner_id="owner-2", budget=100.0, urgency="urgent")
    await make_job(owner_id="owner-2", budget=100.0, urgency="urgent")
    await make_job(owner_id="owner-1", budget=1000.0)

    insights = await get_market_insights(context, "owner-1")

    assert insights.your_average_price == 1000.0
    assert insights.average_market_price == 400.0
    assert insights.demand_trends.current_week == 3
    assert [(item.type, item.impact) for item in insights.recommendations] == [
        ("pricing", "high"),
        ("urgency", "medium"),
    ]

    cheap = await get_market_insights(context, "owner-2")
    assert [(item.type, item.impact) for item in cheap.recommendations] == [
        ("pricing", "medium"),
        ("urgency", "medium"),
    ]


async def test_driver_analytics(context: ServiceContext, make_job) -> None:
    first = await make_job()
    second = await make_job()
    third = await make_job()
    done_id = await submit_application(context, job_id=first.id, driver_id="driver-a", bid_amount=300)
    accepted_id = await submit_application(
        context, job_id=second.id, driver_id="driver-a", bid_amount=200
    )
    await submit_application(context, job_id=third.id, driver_id="driver-a", bid_amount=100)
    await accept_application(context, application_id=done_id, job_id=first.id)
    await accept_application(context, application_id=accepted_id, job_id=second.id)
    await complete_job(context, application_id=done_id)

    analytics = await get_driver_analytics(context, "driver-a")

    assert analytics.total_applications == 3
    assert analytics.acceptance_rate == pytest.approx(200 / 3)
    assert analytics.completion_rate == 50.0
    assert analytics.average_earnings == 300.0
    assert analytics.total_earnings == 300.0
    assert analytics.pending_applications == 1
    assert analytics.monthly_trend.this_month == 3


async def test_driver_analytics_without_applications(context: ServiceContext) -> None:
    analytics = await get_driver_analytics(context, "nobody")

    assert analytics.total_applications == 0
    assert analytics.acceptance_rate == 0.0
    assert analytics.completion_rate == 0.0
    assert analytics.average_earnings == 0.0


def test_monthly_trend_handles_year_boundaries() -> None:
    def _application(submitted_at: datetime) -> JobApplication:
        return JobApplication(
            id=None,
            job_id="job",
            driver_id="driver",
            cargo_owner_id="owner",
            bid_amount=1.0,
            job_info=None,
            driver_info=None,
            submitted_at=submitted_at,
        )

    reference = datetime(2024, 1, 10, tzinfo=timezone.utc)
    applications = [
        _application(datetime(2024, 1, 2, tzinfo=timezone.utc)),
        _application(datetime(2023, 12, 31, tzinfo=timezone.utc)),
        _application(datetime(2023, 12, 1, tzinfo=timezone.utc)),
        _application(datetime(2023, 11, 30, tzinfo=timezone.utc)),
    ]

    trend = calculate_monthly_trend(applications, reference=reference)

    assert (trend.this_month, trend.last_month, trend.trend) == (1, 2, -1)


async def test_applications_summary_groups_pending_bids(
    context: ServiceContext, make_job
) -> None:
    pallets = await make_job(title="Pallets")
    boxes = await make_job(title="Boxes")
    await submit_application(context, job_id=pallets.id, driver_id="driver-a", bid_amount=300)
    await submit_application(context, job_id=pallets.id, driver_id="driver-b", bid_amount=500)
    await submit_application(context, job_id=boxes.id, driver_id="driver-a", bid_amount=120)

    summaries = {
        summary.job_title: summary
        for summary in await get_cargo_owner_applications_summary(context, "owner-1")
    }

    assert set(summaries) == {"Pallets", "Boxes"}
    pallet_summary = summaries["Pallets"]
    assert len(pallet_summary.applications) == 2
    assert (pallet_summary.average_bid, pallet_summary.lowest_bid, pallet_summary.highest_bid) == (
        400.0,
        300.0,
        500.0,
    )
