"""Use cases computing market insights and performance analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

from cargomatch.application.context import ServiceContext
from cargomatch.domain.entities import (
    APPLICATION_STATUS_ACCEPTED,
    APPLICATION_STATUS_COMPLETED,
    APPLICATION_STATUS_PENDING,
    URGENCY_URGENT,
    JobApplication,
    JobPosting,
)
from cargomatch.infrastructure.repositories import ApplicationRepository, JobRepository
from cargomatch.utils import ensure_app_timezone, now_in_app_timezone

from ..applications.validators import ensure_identifier

OWNER_SAMPLE_SIZE = 20
MARKET_SAMPLE_SIZE = 100
DRIVER_SAMPLE_SIZE = 50
TREND_WINDOW = timedelta(days=7)

PRICE_HIGH_RATIO = 1.2
PRICE_LOW_RATIO = 0.8
URGENT_SHARE_THRESHOLD = 0.3

UNKNOWN_JOB_TITLE = "Unknown Job"


@dataclass
class DemandTrend:
    """Job postings of the trailing week compared with the week before."""

    current_week: int
    previous_week: int
    trend: str
    percentage: int


@dataclass
class Recommendation:
    type: str
    message: str
    impact: str


@dataclass
class MarketInsights:
    """Pricing and demand comparison between a cargo owner and the market."""

    average_market_price: float
    your_average_price: float
    demand_trends: DemandTrend
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class MonthlyTrend:
    this_month: int
    last_month: int
    trend: int


@dataclass
class DriverAnalytics:
    """Bidding and earnings performance of a driver."""

    total_applications: int
    acceptance_rate: float
    completion_rate: float
    average_earnings: float
    total_earnings: float
    pending_applications: int
    monthly_trend: MonthlyTrend


@dataclass
class JobApplicationsSummary:
    """Pending bids received for one job."""

    job_id: str
    job_title: str
    applications: list[JobApplication]
    average_bid: float
    lowest_bid: float
    highest_bid: float


def calculate_average_price(jobs: Sequence[JobPosting]) -> float:
    """Return the mean budget of ``jobs``; a missing budget counts as zero."""

    if not jobs:
        return 0.0
    return sum(job.budget or 0.0 for job in jobs) / len(jobs)


def analyze_demand_trends(jobs: Sequence[JobPosting], *, now: datetime) -> DemandTrend:
    week_ago = now - TREND_WINDOW
    two_weeks_ago = now - 2 * TREND_WINDOW
    current_week = sum(
        1 for job in jobs if job.created_at is not None and job.created_at > week_ago
    )
    previous_week = sum(
        1
        for job in jobs
        if job.created_at is not None and two_weeks_ago < job.created_at <= week_ago
    )
    delta = current_week - previous_week
    if delta > 0:
        trend = "increasing"
    elif delta < 0:
        trend = "decreasing"
    else:
        trend = "stable"
    percentage = round(delta / previous_week * 100) if previous_week else 0
    return DemandTrend(
        current_week=current_week,
        previous_week=previous_week,
        trend=trend,
        percentage=percentage,
    )


def generate_recommendations(
    owner_jobs: Sequence[JobPosting], market_jobs: Sequence[JobPosting]
) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    owner_average = calculate_average_price(owner_jobs)
    market_average = calculate_average_price(market_jobs)
    if owner_average > market_average * PRICE_HIGH_RATIO:
        recommendations.append(
            Recommendation(
                type="pricing",
                message="Consider reducing your budget by 10-15% to attract more drivers",
                impact="high",
            )
        )
    elif owner_average < market_average * PRICE_LOW_RATIO:
        recommendations.append(
            Recommendation(
                type="pricing",
                message="You could increase your budget to get faster responses",
                impact="medium",
            )
        )

    if market_jobs:
        urgent = sum(1 for job in market_jobs if job.urgency == URGENCY_URGENT)
        if urgent / len(market_jobs) > URGENT_SHARE_THRESHOLD:
            recommendations.append(
                Recommendation(
                    type="urgency",
                    message=(
                        "Market demand is high. Consider marking shipments as urgent "
                        "for faster pickup"
                    ),
                    impact="medium",
                )
            )
    return recommendations


async def get_market_insights(
    context: ServiceContext,
    owner_id: str,
    *,
    reference: datetime | None = None,
) -> MarketInsights:
    """Compare the owner's recent budgets and the market's demand."""

    owner_id = ensure_identifier(owner_id, "cargo owner")
    jobs = JobRepository(context.store)
    owner_jobs = await jobs.list(owner_id=owner_id, limit=OWNER_SAMPLE_SIZE)
    market_jobs = await jobs.list(limit=MARKET_SAMPLE_SIZE)
    now = ensure_app_timezone(reference) or now_in_app_timezone()
    return MarketInsights(
        average_market_price=calculate_average_price(market_jobs),
        your_average_price=calculate_average_price(owner_jobs),
        demand_trends=analyze_demand_trends(market_jobs, now=now),
        recommendations=generate_recommendations(owner_jobs, market_jobs),
    )


def _month_boundaries(reference: datetime) -> tuple[datetime, datetime]:
    """Return the start of the reference month and the start of the following month."""

    start = reference.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month


def _previous_month_start(current_start: datetime) -> datetime:
    """Return the start datetime of the month preceding ``current_start``."""

    if current_start.month == 1:
        return current_start.replace(year=current_start.year - 1, month=12)
    return current_start.replace(month=current_start.month - 1)


def calculate_monthly_trend(
    applications: Sequence[JobApplication], *, reference: datetime
) -> MonthlyTrend:
    current_start, next_month_start = _month_boundaries(reference)
    previous_start = _previous_month_start(current_start)

    def _count(start: datetime, end: datetime) -> int:
        return sum(
            1
            for application in applications
            if application.submitted_at is not None
            and start <= application.submitted_at < end
        )

    this_month = _count(current_start, next_month_start)
    last_month = _count(previous_start, current_start)
    return MonthlyTrend(
        this_month=this_month,
        last_month=last_month,
        trend=this_month - last_month,
    )


async def get_driver_analytics(
    context: ServiceContext,
    driver_id: str | None = None,
    *,
    reference: datetime | None = None,
) -> DriverAnalytics:
    """Summarize the driver's 50 most recent applications."""

    driver_id = context.resolve_user_id(driver_id, role="driver")
    applications = await ApplicationRepository(context.store).list(
        driver_id=driver_id, limit=DRIVER_SAMPLE_SIZE
    )

    completed = [app for app in applications if app.status == APPLICATION_STATUS_COMPLETED]
    accepted = [app for app in applications if app.status == APPLICATION_STATUS_ACCEPTED]
    pending = [app for app in applications if app.status == APPLICATION_STATUS_PENDING]
    won = len(accepted) + len(completed)
    total_earnings = sum(app.bid_amount or 0.0 for app in completed)

    now = ensure_app_timezone(reference) or now_in_app_timezone()
    return DriverAnalytics(
        total_applications=len(applications),
        acceptance_rate=won / len(applications) * 100 if applications else 0.0,
        completion_rate=len(completed) / won * 100 if won else 0.0,
        average_earnings=total_earnings / len(completed) if completed else 0.0,
        total_earnings=total_earnings,
        pending_applications=len(pending),
        monthly_trend=calculate_monthly_trend(applications, reference=now),
    )


async def get_cargo_owner_applications_summary(
    context: ServiceContext, owner_id: str | None = None
) -> list[JobApplicationsSummary]:
    """Group the owner's pending bids by job with bid statistics."""

    owner_id = context.resolve_user_id(owner_id, role="cargo owner")
    applications = await ApplicationRepository(context.store).list(
        cargo_owner_id=owner_id, statuses=(APPLICATION_STATUS_PENDING,)
    )

    grouped: dict[str, list[JobApplication]] = {}
    for application in applications:
        grouped.setdefault(application.job_id, []).append(application)

    summaries: list[JobApplicationsSummary] = []
    for job_id, group in grouped.items():
        bids = [application.bid_amount or 0.0 for application in group]
        summaries.append(
            JobApplicationsSummary(
                job_id=job_id,
                job_title=group[0].job_info.title or UNKNOWN_JOB_TITLE,
                applications=group,
                average_bid=sum(bids) / len(bids),
                lowest_bid=min(bids),
                highest_bid=max(bids),
            )
        )
    return summaries


__all__ = [
    "DemandTrend",
    "DriverAnalytics",
    "JobApplicationsSummary",
    "MarketInsights",
    "MonthlyTrend",
    "Recommendation",
    "analyze_demand_trends",
    "calculate_average_price",
    "calculate_monthly_trend",
    "generate_recommendations",
    "get_cargo_owner_applications_summary",
    "get_driver_analytics",
    "get_market_insights",
]
