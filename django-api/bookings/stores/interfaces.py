"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Writes that must not
race are expressed as guarded operations here, so that every implementation
has to provide them atomically.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime

from bookings.domain import (
    Event,
    EventDraft,
    EventId,
    EventPatch,
    HistoryCategory,
    HistoryEntry,
    ProfilePatch,
    Reservation,
    ReservationId,
    ReservationStatus,
    Role,
    User,
    UserId,
    UserReservation,
)
from bookings.domain.models import AttendanceSheetRow, ReservationReportRow, UserReportRow


class TransactionScope(ABC):
    """Scopes a unit of work to a single all-or-nothing transaction."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager that commits on success and rolls back on error.

        Nested scopes must behave as savepoints of the enclosing one.
        """
        ...


class EventStore(ABC):
    """Interface for event persistence, including the seat counters."""

    @abstractmethod
    def list_available(self, today: date) -> list[Event]:
        """Return active events from `today` on with seats left, by date then time."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by date then time."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID holding a row lock until the transaction ends."""
        ...

    @abstractmethod
    def create_event(self, draft: EventDraft) -> Event:
        """Insert an event with available capacity equal to its total."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, patch: EventPatch) -> Event | None:
        """Apply the supplied fields only. Return None if the event does not exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event and its reservations. Return False if it did not exist."""
        ...

    @abstractmethod
    def take_seat(self, event_id: EventId) -> bool:
        """Decrement available capacity only if it is above zero.

        Returns True when a seat was taken.
        """
        ...

    @abstractmethod
    def release_seat(self, event_id: EventId) -> bool:
        """Increment available capacity only if it is below the total.

        Returns True when a seat was released.
        """
        ...


class UserStore(ABC):
    """Interface for user persistence."""

    @abstractmethod
    def get_user(self, user_id: UserId) -> User | None:
        ...

    @abstractmethod
    def lock_user(self, user_id: UserId) -> User | None:
        """Return a user holding a row lock until the transaction ends."""
        ...

    @abstractmethod
    def list_users(self) -> list[User]:
        """Return all users, newest first."""
        ...

    @abstractmethod
    def find_credentials(self, email: str) -> tuple[User, str] | None:
        """Return the user with this email (case-insensitive) and their password hash."""
        ...

    @abstractmethod
    def get_password_hash(self, user_id: UserId) -> str | None:
        ...

    @abstractmethod
    def create_user(
        self, name: str, email: str, phone: str, password_hash: str, role: Role
    ) -> User:
        """Insert a user. Raises EmailTakenError if the email is registered."""
        ...

    @abstractmethod
    def save_reliability(self, user: User) -> None:
        """Persist status, lock expiry and absence counters of `user`."""
        ...

    @abstractmethod
    def update_profile(self, user_id: UserId, patch: ProfilePatch) -> User | None:
        ...

    @abstractmethod
    def set_password_hash(self, user_id: UserId, password_hash: str) -> None:
        ...

    @abstractmethod
    def touch_last_login(self, user_id: UserId, at: datetime) -> None:
        ...


class ReservationStore(ABC):
    """Interface for reservation persistence."""

    @abstractmethod
    def get_reservation(self, reservation_id: ReservationId) -> Reservation | None:
        ...

    @abstractmethod
    def lock_reservation(self, reservation_id: ReservationId) -> Reservation | None:
        """Return a reservation holding a row lock until the transaction ends."""
        ...

    @abstractmethod
    def find_for_pair(self, user_id: UserId, event_id: EventId) -> Reservation | None:
        """Return the (single) reservation row of a user at an event, locked."""
        ...

    @abstractmethod
    def next_sequence_number(self, event_id: EventId) -> int:
        """Return the highest sequence number at the event plus one, starting at 1."""
        ...

    @abstractmethod
    def insert(self, user_id: UserId, event_id: EventId, sequence_number: int) -> Reservation:
        """Insert a confirmed reservation. Raises DuplicateActiveError on a pair clash."""
        ...

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist status, attendance, timestamps and notes of `reservation`."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: UserId) -> list[UserReservation]:
        """Return a user's reservations with their events, latest event first."""
        ...

    @abstractmethod
    def count_by_status_for_user(self, user_id: UserId) -> dict[ReservationStatus, int]:
        ...

    @abstractmethod
    def count_by_status_for_event(self, event_id: EventId) -> dict[ReservationStatus, int]:
        ...

    @abstractmethod
    def seat_holders(self, user_id: UserId) -> set[EventId]:
        """Return the events at which the user holds a seat."""
        ...


class HistoryStore(ABC):
    """Interface for the append-only audit trail."""

    @abstractmethod
    def append(self, user_id: UserId, category: HistoryCategory, description: str) -> HistoryEntry:
        ...

    @abstractmethod
    def list_for_user(self, user_id: UserId) -> list[HistoryEntry]:
        """Return a user's entries, newest first."""
        ...


class ReportStore(ABC):
    """Read-only projections for administrators."""

    @abstractmethod
    def reservations_report(self, event_id: EventId | None = None) -> list[ReservationReportRow]:
        """Reservations with user and event details, by event date then booking time."""
        ...

    @abstractmethod
    def users_report(self) -> list[UserReportRow]:
        """Per-user reservation totals, newest user first."""
        ...

    @abstractmethod
    def attendance_sheet(self, event_id: EventId | None = None) -> list[AttendanceSheetRow]:
        """Printable attendance lines, by event date then name."""
        ...
