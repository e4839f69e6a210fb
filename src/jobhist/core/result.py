"""Explicit result type for history parsing operations.

Parsing never raises to its caller. Instead of collapsing every failure into
``None`` or an empty list, operations return a ``ParseResult`` that either
carries a value or a tagged failure reason, so callers can tell "no artifact"
apart from "artifact unreadable". ``value_or`` restores the plain sentinel
behaviour for callers that do not care.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureReason(str, Enum):
    """
    Reason a parse operation produced no value.

    Values:
        NOT_FOUND: The expected artifact is not present in the folder.
        IO_ERROR: Listing or reading the filesystem failed.
        MALFORMED: The artifact exists but could not be decoded.
    """

    NOT_FOUND = "NOT_FOUND"
    IO_ERROR = "IO_ERROR"
    MALFORMED = "MALFORMED"


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of a parse operation: a value or a failure reason."""

    value: T | None = None
    failure: FailureReason | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: T) -> ParseResult[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, reason: FailureReason, detail: str | None = None) -> ParseResult[T]:
        return cls(failure=reason, detail=detail)

    @property
    def ok(self) -> bool:
        """True when the operation produced a value."""
        return self.failure is None

    def value_or(self, default: T | None) -> T | None:
        """Return the value, or ``default`` when the operation failed."""
        return self.value if self.ok else default
