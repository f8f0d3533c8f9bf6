"""Error-as-value result shared by every I/O-touching operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class ProgressError(Exception):
    """Base exception for lift-progress programming errors."""


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a storage or service call.

    Storage and service layers never raise across their boundary; they
    return a failed result carrying a message instead.
    """

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the payload of a successful result.

        Raises:
            ProgressError: If the result is a failure.
        """
        if not self.success:
            raise ProgressError(self.error or "operation failed")
        return self.data

    def to_dict(self) -> dict:
        """Convert to the ``{success, data?, error?}`` shape."""
        payload: dict = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error
        return payload
