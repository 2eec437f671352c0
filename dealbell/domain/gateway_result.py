"""
Result type returned by every messaging gateway call.

Transport failures are converted into values at the gateway boundary so callers
have to look at the error slot before using the result.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Either a value or an error description, never both."""

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "GatewayResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "GatewayResult[T]":
        return cls(error=error or "unknown error")

    def unwrap(self) -> T:
        """Return the value, raising ValueError if this is a failure."""
        if self.error is not None:
            raise ValueError(self.error)
        return self.value
