"""Unit tests for EventService.

These test the listing rules and domain error mapping.
Run with: pytest tests/test_event_service.py -v
"""

from datetime import date, time, timedelta

import pytest

from bookings.domain import EventDraft, EventId, EventPatch, EventStatus
from bookings.domain.errors import ErrorCode


@pytest.mark.django_db
class TestListAvailable:
    """Tests for EventService.list_available."""

    def test_only_active_upcoming_events_with_seats(self, event_service, make_event, clock):
        make_event(title="Yesterday", starts_at=clock() - timedelta(days=1))
        make_event(title="Full", capacity=5, available_capacity=0)
        make_event(title="Closed", status=EventStatus.CLOSED.value)
        make_event(title="Later", starts_at=clock() + timedelta(days=5))
        make_event(title="Tonight", starts_at=clock() + timedelta(hours=6))
        make_event(title="This morning", starts_at=clock() - timedelta(hours=2))

        titles = [event.title for event in event_service.list_available().value]

        assert titles == ["This morning", "Tonight", "Later"]

    def test_booked_event_ids_cover_seat_holding_reservations(
        self, event_service, reservation_service, member, make_event
    ):
        confirmed, present, cancelled = (make_event(title=t) for t in ("A", "B", "C"))
        reservation_service.create(member.pk, confirmed.pk)
        presence = reservation_service.create(member.pk, present.pk).value
        reservation_service.record_presence(presence.id)
        dropped = reservation_service.create(member.pk, cancelled.pk).value
        reservation_service.cancel(dropped.id, member.pk)

        booked = event_service.booked_event_ids(member.pk).value

        assert booked == {EventId(confirmed.pk), EventId(present.pk)}


@pytest.mark.django_db
class TestEventAdministration:
    """Tests for event create, update and delete."""

    def test_get_event_invalid_id(self, event_service):
        """get_event reports INVALID_ID for a malformed ID."""
        assert event_service.get_event("not-a-number").error.code is ErrorCode.INVALID_ID

    def test_get_event_not_found(self, event_service):
        assert event_service.get_event(999).error.code is ErrorCode.NOT_FOUND

    def test_create_starts_full(self, event_service):
        draft = EventDraft(
            title="Harvest fair",
            event_date=date(2026, 4, 2),
            event_time=time(10, 30),
            total_capacity=40,
            location="Main hall",
        )

        event = event_service.create_event(draft).value

        assert event.capacity.total == 40
        assert event.capacity.available == 40
        assert event.status is EventStatus.ACTIVE

    def test_partial_update_leaves_other_fields_and_capacity(
        self, event_service, reservation_service, member, event
    ):
        reservation_service.create(member.pk, event.pk)

        updated = event_service.update_event(
            event.pk, EventPatch(title="Renamed", status=EventStatus.CLOSED)
        ).value

        assert updated.title == "Renamed"
        assert updated.status is EventStatus.CLOSED
        assert updated.event_date == event.event_date
        assert updated.capacity.total == 10
        assert updated.capacity.available == 9

    def test_empty_update(self, event_service, event):
        result = event_service.update_event(event.pk, EventPatch())
        assert result.error.code is ErrorCode.NOTHING_TO_UPDATE

    def test_update_missing_event(self, event_service):
        result = event_service.update_event(999, EventPatch(title="x"))
        assert result.error.code is ErrorCode.NOT_FOUND

    def test_delete(self, event_service, event):
        assert event_service.delete_event(event.pk).ok
        assert event_service.get_event(event.pk).error.code is ErrorCode.NOT_FOUND
        assert event_service.delete_event(event.pk).error.code is ErrorCode.NOT_FOUND
