"""Database configuration and session management."""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:")


def build_engine(database_url: str) -> Engine:
    """Create an engine suitable for use from worker threads.

    SQLite connections are shared across threads, and an in-memory database
    is pinned to a single connection so every session sees the same data.
    """

    if database_url.startswith("sqlite"):
        options: dict[str, object] = {
            "connect_args": {"check_same_thread": False},
        }
        if _is_memory_sqlite(database_url):
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from cargomatch.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.debug("Document tables ready on %s", engine.url.render_as_string(hide_password=True))


__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "initialize_database",
]
