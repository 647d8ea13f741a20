"""Validation helpers for job application use cases."""

from __future__ import annotations

import math
from typing import Any

from cargomatch.domain.entities import JobApplication
from cargomatch.domain.errors import ConflictError, ValidationError

MIN_RATING = 1
MAX_RATING = 5


def ensure_identifier(value: str | None, label: str) -> str:
    """Return ``value`` stripped, raising when it is empty."""

    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"A {label} identifier is required")
    return cleaned


def ensure_valid_bid(bid_amount: Any) -> float:
    """Return ``bid_amount`` as a positive finite float."""

    if isinstance(bid_amount, bool):
        raise ValidationError("The bid amount must be a number")
    try:
        amount = float(bid_amount)
    except (TypeError, ValueError) as exc:
        raise ValidationError("The bid amount must be a number") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("The bid amount must be a positive number")
    return amount


def ensure_valid_rating(rating: Any) -> float:
    if isinstance(rating, bool):
        raise ValidationError("The rating must be a number")
    try:
        value = float(rating)
    except (TypeError, ValueError) as exc:
        raise ValidationError("The rating must be a number") from exc
    if not math.isfinite(value) or not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(f"The rating must be between {MIN_RATING} and {MAX_RATING}")
    return value


def ensure_transition(application: JobApplication, status: str) -> None:
    """Raise :class:`ConflictError` when ``application`` cannot move to ``status``."""

    if not application.can_transition_to(status):
        raise ConflictError(
            f"Application {application.id} is {application.status} and cannot become {status}"
        )


__all__ = [
    "ensure_identifier",
    "ensure_valid_bid",
    "ensure_valid_rating",
    "ensure_transition",
]
