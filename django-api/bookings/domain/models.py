"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).

Reservation transitions:

    confirmed -> cancelled | present | absent
    cancelled -> confirmed   (reactivation of the same row)

present and absent are terminal for a booking cycle.
"""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time

from bookings.domain.enums import (
    AttendanceStatus,
    EventStatus,
    HistoryCategory,
    ReservationStatus,
    Role,
    UserStatus,
)
from bookings.domain.errors import InvalidStateError
from bookings.domain.value_objects import (
    Capacity,
    EventId,
    Justification,
    ReliabilityPolicy,
    ReservationId,
    UserId,
)

NOTES_SEPARATOR = " | "

_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.CANCELLED, ReservationStatus.PRESENT, ReservationStatus.ABSENT}
    ),
    ReservationStatus.CANCELLED: frozenset({ReservationStatus.CONFIRMED}),
    ReservationStatus.PRESENT: frozenset(),
    ReservationStatus.ABSENT: frozenset(),
}


@dataclass(frozen=True)
class User:
    """Domain representation of a User and their reliability state."""

    id: UserId
    name: str
    email: str
    phone: str
    role: Role
    status: UserStatus
    locked_until: datetime | None
    consecutive_absences: int
    total_absences: int
    date_joined: datetime
    last_login: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_locked(self) -> bool:
        return self.status is UserStatus.LOCKED

    def lock_expired(self, now: datetime) -> bool:
        # Locks without an expiry are treated as expired.
        return self.locked_until is None or self.locked_until <= now

    def days_until_unlock(self, now: datetime) -> int:
        if self.locked_until is None:
            return 0
        return math.ceil((self.locked_until - now).total_seconds() / 86400)

    def with_absence(self, at: datetime, policy: ReliabilityPolicy) -> "User":
        consecutive = self.consecutive_absences + 1
        total = self.total_absences + 1
        if consecutive >= policy.absence_limit:
            return replace(
                self,
                status=UserStatus.LOCKED,
                locked_until=at + policy.lock_duration,
                consecutive_absences=0,
                total_absences=total,
            )
        return replace(self, consecutive_absences=consecutive, total_absences=total)

    def with_presence(self) -> "User":
        return replace(self, consecutive_absences=0)

    def unlocked(self) -> "User":
        return replace(
            self,
            status=UserStatus.ACTIVE,
            locked_until=None,
            consecutive_absences=0,
        )


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    event_date: date
    event_time: time
    starts_at: datetime
    location: str
    capacity: Capacity
    status: EventStatus
    gate_opens_at: time | None
    notes: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Reservation:
    """Domain representation of a Reservation (one seat, one user, one event)."""

    id: ReservationId
    user_id: UserId
    event_id: EventId
    sequence_number: int
    status: ReservationStatus
    attendance: AttendanceStatus
    created_at: datetime
    cancelled_at: datetime | None = None
    present_at: datetime | None = None
    notes: str = ""

    def can_transition_to(self, target: ReservationStatus) -> bool:
        return target in _TRANSITIONS[self.status]

    def _require(self, target: ReservationStatus, message: str) -> None:
        if not self.can_transition_to(target):
            raise InvalidStateError(message)

    def reactivated(self) -> "Reservation":
        self._require(
            ReservationStatus.CONFIRMED,
            "Attendance for this event has already been recorded.",
        )
        return replace(
            self,
            status=ReservationStatus.CONFIRMED,
            attendance=AttendanceStatus.PENDING,
            cancelled_at=None,
        )

    def cancelled(self, at: datetime, justification: Justification | None) -> "Reservation":
        self._require(
            ReservationStatus.CANCELLED,
            "Only confirmed reservations can be cancelled.",
        )
        notes = self.notes
        if justification is not None:
            notes = NOTES_SEPARATOR.join(part for part in (notes, justification.text) if part)
        return replace(
            self,
            status=ReservationStatus.CANCELLED,
            cancelled_at=at,
            notes=notes,
        )

    def marked_present(self, at: datetime) -> "Reservation":
        self._require(
            ReservationStatus.PRESENT,
            "Only confirmed reservations can be marked present.",
        )
        return replace(
            self,
            status=ReservationStatus.PRESENT,
            attendance=AttendanceStatus.CONFIRMED,
            present_at=at,
        )

    def marked_absent(self) -> "Reservation":
        self._require(
            ReservationStatus.ABSENT,
            "Only confirmed reservations can be marked absent.",
        )
        return replace(
            self,
            status=ReservationStatus.ABSENT,
            attendance=AttendanceStatus.ABSENT,
        )


@dataclass(frozen=True)
class UserReservation:
    """A reservation together with the event it is for."""

    reservation: Reservation
    event: Event


@dataclass(frozen=True)
class HistoryEntry:
    """Append-only audit trail entry."""

    id: int
    user_id: UserId
    category: HistoryCategory
    description: str
    created_at: datetime


def _rate(part: int, whole: int) -> int:
    # Halves round up.
    return math.floor(part / whole * 100 + 0.5) if whole > 0 else 0


@dataclass(frozen=True)
class UserStatistics:
    """Attendance summary of one user. Cancelled reservations are not in `total`."""

    total: int
    present: int
    absent: int
    cancelled: int
    presence_rate: int

    @classmethod
    def from_counts(cls, counts: dict[ReservationStatus, int]) -> "UserStatistics":
        cancelled = counts.get(ReservationStatus.CANCELLED, 0)
        total = sum(counts.values()) - cancelled
        present = counts.get(ReservationStatus.PRESENT, 0)
        return cls(
            total=total,
            present=present,
            absent=counts.get(ReservationStatus.ABSENT, 0),
            cancelled=cancelled,
            presence_rate=_rate(present, total),
        )


@dataclass(frozen=True)
class EventStatistics:
    """Attendance summary of one event. The rate is relative to total capacity."""

    event: Event
    present: int
    absent: int
    confirmed: int
    presence_rate: int

    @classmethod
    def from_counts(cls, event: Event, counts: dict[ReservationStatus, int]) -> "EventStatistics":
        present = counts.get(ReservationStatus.PRESENT, 0)
        return cls(
            event=event,
            present=present,
            absent=counts.get(ReservationStatus.ABSENT, 0),
            confirmed=counts.get(ReservationStatus.CONFIRMED, 0),
            presence_rate=_rate(present, event.capacity.total),
        )


@dataclass(frozen=True)
class ReservationReportRow:
    reservation_id: int
    sequence_number: int
    status: ReservationStatus
    booked_at: datetime
    user_id: int
    user_name: str
    user_email: str
    user_phone: str
    event_id: int
    event_title: str
    event_date: date


@dataclass(frozen=True)
class UserReportRow:
    user_id: int
    name: str
    email: str
    phone: str
    status: UserStatus
    date_joined: datetime
    total_reservations: int
    presences: int
    absences: int
    confirmed: int


@dataclass(frozen=True)
class AttendanceSheetRow:
    """One printable line of an attendance sheet; `presence` is left blank."""

    sequence_number: int
    name: str
    event_title: str
    event_date: date
    justification: str
    presence: str = ""
