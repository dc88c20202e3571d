"""Event service - catalogue and administration of events.

Capacity counters are never written here: new events start full and
updates only touch the fields a patch carries.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from bookings.domain import Event, EventDraft, EventId, EventPatch, UserId
from bookings.domain.errors import EventNotFoundError, NothingToUpdateError
from bookings.services.boundary import as_result, parse_id
from bookings.stores.interfaces import EventStore, ReservationStore

logger = logging.getLogger(__name__)


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        events: EventStore,
        reservations: ReservationStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._events = events
        self._reservations = reservations
        self._clock = clock

    @as_result
    def list_available(self) -> list[Event]:
        """Return active, upcoming events with seats left, soonest first."""
        return self._events.list_available(timezone.localdate(self._clock()))

    @as_result
    def booked_event_ids(self, user_id: int | str) -> set[EventId]:
        """Return the events at which the user currently holds a seat."""
        return self._reservations.seat_holders(parse_id(UserId, user_id, "user"))

    @as_result
    def list_events(self) -> list[Event]:
        return self._events.list_events()

    @as_result
    def get_event(self, event_id: int | str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a positive integer.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_id(EventId, event_id, "event")
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(eid)
        return event

    @as_result
    def create_event(self, draft: EventDraft) -> Event:
        event = self._events.create_event(draft)
        logger.info("Event %s created with %d seats", event.id, event.capacity.total)
        return event

    @as_result
    def update_event(self, event_id: int | str, patch: EventPatch) -> Event:
        """Apply a partial update.

        Raises:
            NothingToUpdateError: If the patch carries no field.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_id(EventId, event_id, "event")
        if patch.is_empty():
            raise NothingToUpdateError()
        event = self._events.update_event(eid, patch)
        if event is None:
            raise EventNotFoundError(eid)
        logger.info("Event %s updated: %s", eid, ", ".join(patch.changes()))
        return event

    @as_result
    def delete_event(self, event_id: int | str) -> None:
        eid = parse_id(EventId, event_id, "event")
        if not self._events.delete_event(eid):
            raise EventNotFoundError(eid)
        logger.info("Event %s deleted", eid)
