"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass, fields
from datetime import date, datetime, time, timedelta
from typing import Self

from bookings.domain.enums import EventStatus


@dataclass(frozen=True)
class _IntegerId:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"{type(self).__name__} must be an integer")
        if self.value < 1:
            raise ValueError(f"{type(self).__name__} must be positive")

    @classmethod
    def parse(cls, value: int | str) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            value = int(value.strip())
        return cls(value=value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(_IntegerId):
    """Unique identifier for a User."""


@dataclass(frozen=True)
class EventId(_IntegerId):
    """Unique identifier for an Event."""


@dataclass(frozen=True)
class ReservationId(_IntegerId):
    """Unique identifier for a Reservation."""


@dataclass(frozen=True)
class Capacity:
    """Seat counters of an event. Always 0 <= available <= total."""

    total: int
    available: int

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError("Capacity cannot be negative")
        if not 0 <= self.available <= self.total:
            raise ValueError("Available seats must be between 0 and the total capacity")

    @classmethod
    def full(cls, total: int) -> Self:
        return cls(total=total, available=total)

    @property
    def has_availability(self) -> bool:
        return self.available > 0

    @property
    def taken(self) -> int:
        return self.total - self.available


@dataclass(frozen=True)
class Justification:
    """Non-blank free text explaining a late cancellation."""

    text: str

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("Justification cannot be blank")

    @classmethod
    def from_input(cls, raw: str | None) -> Self | None:
        """Return None for missing or blank input."""
        if raw is None or not raw.strip():
            return None
        return cls(text=raw.strip())

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class CancellationPolicy:
    """How much notice a cancellation needs before a justification is required."""

    notice_hours: int = 24

    @property
    def notice(self) -> timedelta:
        return timedelta(hours=self.notice_hours)

    def requires_justification(self, starts_at: datetime, now: datetime) -> bool:
        # Real elapsed time; exactly `notice_hours` away is still on time.
        return starts_at - now < self.notice


@dataclass(frozen=True)
class ReliabilityPolicy:
    """Consecutive absences that trigger a lock, and how long it lasts."""

    absence_limit: int = 3
    lock_days: int = 30

    def __post_init__(self) -> None:
        if self.absence_limit < 1:
            raise ValueError("Absence limit must be at least 1")
        if self.lock_days < 1:
            raise ValueError("Lock duration must be at least one day")

    @property
    def lock_duration(self) -> timedelta:
        return timedelta(days=self.lock_days)


@dataclass(frozen=True)
class EventDraft:
    """Fields required to create an event. Capacity starts full."""

    title: str
    event_date: date
    event_time: time
    total_capacity: int
    location: str = ""
    description: str = ""
    gate_opens_at: time | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("Event title cannot be blank")
        Capacity.full(self.total_capacity)


@dataclass(frozen=True)
class EventPatch:
    """Partial update of an event. Fields left as None are not touched.

    Capacity counters are not patchable; they only move through the
    capacity ledger.
    """

    title: str | None = None
    description: str | None = None
    event_date: date | None = None
    event_time: time | None = None
    gate_opens_at: time | None = None
    location: str | None = None
    status: EventStatus | None = None
    notes: str | None = None

    def changes(self) -> dict[str, object]:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class ProfilePatch:
    """Partial update of a user's profile."""

    name: str | None = None
    phone: str | None = None

    def changes(self) -> dict[str, object]:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()
