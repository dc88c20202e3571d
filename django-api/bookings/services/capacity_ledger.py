"""Capacity ledger: the only writer of an event's seat counters."""

import logging

from bookings.domain import EventId
from bookings.domain.errors import NoCapacityError
from bookings.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


class CapacityLedger:
    """Seat accounting for events.

    Both directions are guarded updates at the storage layer, so concurrent
    callers can neither push the counter below zero nor above the total.
    """

    def __init__(self, events: EventStore) -> None:
        self._events = events

    def has_availability(self, event_id: EventId) -> bool:
        event = self._events.get_event(event_id)
        return event is not None and event.capacity.has_availability

    def decrement(self, event_id: EventId) -> None:
        """Take one seat.

        Raises:
            NoCapacityError: If no seat is left at the moment of the update.
        """
        if not self._events.take_seat(event_id):
            raise NoCapacityError()

    def increment(self, event_id: EventId) -> bool:
        """Give one seat back. Returns False if the counter was already full."""
        released = self._events.release_seat(event_id)
        if not released:
            logger.warning(
                "Seat release for event %s ignored: available capacity already at total",
                event_id,
            )
        return released
