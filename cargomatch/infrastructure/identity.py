"""Session identity providers."""

from __future__ import annotations

from typing import Protocol

from cargomatch.domain.entities import UserIdentity


class IdentityProvider(Protocol):
    """Collaborator reporting who is driving the current session."""

    def current_user(self) -> UserIdentity | None: ...


class StaticIdentityProvider:
    """Session object holding the signed-in user, if any."""

    def __init__(self, user: UserIdentity | None = None) -> None:
        self._user = user

    def current_user(self) -> UserIdentity | None:
        return self._user

    def sign_in(self, user: UserIdentity) -> None:
        self._user = user

    def sign_out(self) -> None:
        self._user = None


__all__ = ["IdentityProvider", "StaticIdentityProvider"]
