"""
Operation results for soft-failing service calls.

Catalog, stream, meta and EPG refresh operations never raise to the addon
host. Each returns an OperationResult carrying the value to serve and
whether it is the real answer or a degraded fallback.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultStatus(str, Enum):
    """Outcome of an operation."""

    OK = "ok"
    DEGRADED = "degraded"  # Failed; value is the empty/minimal fallback
    SKIPPED = "skipped"  # Not attempted (feature disabled)


@dataclass
class OperationResult(Generic[T]):
    """A value plus the status of the operation that produced it."""

    value: T
    status: ResultStatus = ResultStatus.OK
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.OK

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def degraded(cls, value: T, error: Exception | str) -> "OperationResult[T]":
        return cls(value=value, status=ResultStatus.DEGRADED, error=str(error))

    @classmethod
    def skipped(cls, value: T, reason: str) -> "OperationResult[T]":
        return cls(value=value, status=ResultStatus.SKIPPED, error=reason)
