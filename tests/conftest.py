"""Shared fixtures: an in-memory document store and a service context per test."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import pytest

from cargomatch.application.context import ServiceContext
from cargomatch.config import Settings
from cargomatch.domain.entities import (
    DRIVER_STATUS_AVAILABLE,
    DriverProfile,
    JobPosting,
    Location,
    UserIdentity,
    Vehicle,
)
from cargomatch.infrastructure.database import build_engine
from cargomatch.infrastructure.document_store import SqlDocumentStore
from cargomatch.infrastructure.identity import StaticIdentityProvider
from cargomatch.infrastructure.repositories import DriverRepository, JobRepository

OWNER_ID = "owner-1"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        persistence_timeout_seconds=5.0,
        allow_duplicate_applications=True,
    )


@pytest.fixture
def store(settings: Settings) -> SqlDocumentStore:
    return SqlDocumentStore(
        build_engine(settings.database_url),
        timeout=settings.persistence_timeout_seconds,
    )


@pytest.fixture
def identity() -> StaticIdentityProvider:
    return StaticIdentityProvider(UserIdentity(id=OWNER_ID, email="owner@example.com"))


@pytest.fixture
def context(
    store: SqlDocumentStore, identity: StaticIdentityProvider, settings: Settings
) -> ServiceContext:
    return ServiceContext(store=store, identity=identity, settings=settings)


def build_job(**overrides: Any) -> JobPosting:
    values: dict[str, Any] = {
        "id": None,
        "owner_id": OWNER_ID,
        "title": "Electronics to Detroit",
        "pickup": Location(address="123 Main St", city="Chicago", country="USA"),
        "delivery": Location(address="9 Elm St", city="Detroit", country="USA"),
        "cargo_type": "electronics",
        "budget": 500.0,
        "required_vehicle_type": "box truck",
        "estimated_distance": 300.0,
    }
    values.update(overrides)
    return JobPosting(**values)


def build_driver(**overrides: Any) -> DriverProfile:
    values: dict[str, Any] = {
        "id": "driver-a",
        "name": "Alex Driver",
        "vehicle": Vehicle(type="Box Truck", capacity=12.0),
        "rating": 4.5,
        "completed_jobs": 20,
        "current_location": "Chicago",
        "status": DRIVER_STATUS_AVAILABLE,
    }
    values.update(overrides)
    return DriverProfile(**values)


@pytest.fixture
def make_job(store: SqlDocumentStore) -> Callable[..., Awaitable[JobPosting]]:
    async def _make(**overrides: Any) -> JobPosting:
        return await JobRepository(store).create(build_job(**overrides))

    return _make


@pytest.fixture
def make_driver(store: SqlDocumentStore) -> Callable[..., Awaitable[DriverProfile]]:
    async def _make(**overrides: Any) -> DriverProfile:
        return await DriverRepository(store).create(build_driver(**overrides))

    return _make
