"""History entries written alongside booking state changes."""

from datetime import datetime

from django.utils import timezone

from bookings.domain import Event, HistoryCategory, HistoryEntry, Justification, UserId
from bookings.stores.interfaces import HistoryStore


class AuditTrail:
    """Appends human-readable history entries. Entries are never changed."""

    def __init__(self, history: HistoryStore) -> None:
        self._history = history

    def booked(self, user_id: UserId, event: Event, sequence_number: int) -> HistoryEntry:
        return self._history.append(
            user_id,
            HistoryCategory.BOOKING,
            f"Booked: {event.title} (#{sequence_number})",
        )

    def cancelled(
        self, user_id: UserId, event: Event, justification: Justification | None
    ) -> HistoryEntry:
        description = f"Cancelled: {event.title}"
        if justification is not None:
            description += f" - Justification: {justification}"
        return self._history.append(user_id, HistoryCategory.CANCELLATION, description)

    def present(self, user_id: UserId, event: Event) -> HistoryEntry:
        return self._history.append(user_id, HistoryCategory.PRESENCE, f"Present: {event.title}")

    def absent(self, user_id: UserId, event: Event) -> HistoryEntry:
        return self._history.append(user_id, HistoryCategory.ABSENCE, f"Absent: {event.title}")

    def locked(self, user_id: UserId, until: datetime) -> HistoryEntry:
        return self._history.append(
            user_id,
            HistoryCategory.LOCKOUT,
            f"Account locked until {timezone.localtime(until):%Y-%m-%d %H:%M} after consecutive absences",
        )

    def unlocked(self, user_id: UserId) -> HistoryEntry:
        return self._history.append(user_id, HistoryCategory.UNLOCK, "Account unlocked")

    def for_user(self, user_id: UserId) -> list[HistoryEntry]:
        return self._history.list_for_user(user_id)
