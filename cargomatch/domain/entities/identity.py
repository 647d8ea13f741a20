"""Identity of the user driving the current session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated user as reported by the session collaborator."""

    id: str
    email: str


__all__ = ["UserIdentity"]
