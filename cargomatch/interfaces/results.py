"""Pydantic models describing the outcome of a facade call."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cargomatch.domain.errors import DomainError


class ErrorInfo(BaseModel):
    """Machine readable kind plus a human readable message."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Error category, e.g. not_found or conflict")
    message: str

    @classmethod
    def from_error(cls, error: DomainError) -> "ErrorInfo":
        return cls(kind=error.kind, message=error.message)


class OperationResult(BaseModel):
    """Either a value (``ok``) or an :class:`ErrorInfo`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    value: Any = None
    error: ErrorInfo | None = None

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "OperationResult":
        return cls(ok=False, error=ErrorInfo.from_error(error))


__all__ = ["ErrorInfo", "OperationResult"]
