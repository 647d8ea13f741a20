"""Error types raised by the core use cases."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for failures that cross the core boundary as structured results."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """A referenced job, application, profile or notification does not exist."""

    kind = "not_found"


class ValidationError(DomainError):
    """Input is malformed, such as a non-positive bid or a missing identifier."""

    kind = "validation"


class ConflictError(DomainError):
    """The requested state transition is not allowed from the current state."""

    kind = "conflict"


class PersistenceError(DomainError):
    """The underlying document store call failed."""

    kind = "persistence"


class PersistenceTimeoutError(PersistenceError):
    """The underlying document store call did not finish in time."""

    kind = "persistence_timeout"


__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "PersistenceError",
    "PersistenceTimeoutError",
]
