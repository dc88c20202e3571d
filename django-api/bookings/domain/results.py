"""Structured outcome returned across the service boundary."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from bookings.domain.errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or the domain error that prevented it."""

    value: T | None = None
    error: DomainError | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""

    def unwrap(self) -> T:
        """Return the value, re-raising the error of a failed result."""
        if self.error is not None:
            raise self.error
        return self.value
