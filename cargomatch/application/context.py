"""Explicit per-call context shared by every use case."""

from __future__ import annotations

from dataclasses import dataclass, field

from cargomatch.config import Settings, get_settings
from cargomatch.domain.entities import UserIdentity
from cargomatch.domain.errors import ValidationError
from cargomatch.infrastructure.database import build_engine
from cargomatch.infrastructure.document_store import DocumentStore, SqlDocumentStore
from cargomatch.infrastructure.identity import IdentityProvider, StaticIdentityProvider


@dataclass
class ServiceContext:
    """Bundle of the collaborators a use case needs.

    The context replaces ambient global state: the document store, the session
    identity and the settings are handed to each operation explicitly.
    """

    store: DocumentStore
    identity: IdentityProvider = field(default_factory=StaticIdentityProvider)
    settings: Settings = field(default_factory=get_settings)

    def current_user(self) -> UserIdentity | None:
        return self.identity.current_user()

    def resolve_user_id(self, explicit_id: str | None, *, role: str = "user") -> str:
        """Return ``explicit_id`` or fall back to the signed-in user's id."""

        if explicit_id:
            return explicit_id
        user = self.current_user()
        if user is None or not user.id:
            raise ValidationError(f"A {role} identifier is required")
        return user.id


def build_context(
    settings: Settings | None = None,
    *,
    identity: IdentityProvider | None = None,
) -> ServiceContext:
    """Create a context wired to the SQLAlchemy document store from ``settings``."""

    settings = settings or get_settings()
    store = SqlDocumentStore(
        build_engine(settings.database_url),
        timeout=settings.persistence_timeout_seconds,
    )
    return ServiceContext(
        store=store,
        identity=identity or StaticIdentityProvider(),
        settings=settings,
    )


__all__ = ["ServiceContext", "build_context"]
