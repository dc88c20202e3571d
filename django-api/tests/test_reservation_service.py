"""Tests for ReservationService: the booking state machine, capacity
conservation and the late-cancellation rule.

Run with: pytest tests/test_reservation_service.py -v
"""

import threading
from datetime import timedelta

import pytest
from django.db import DatabaseError, connection

from bookings import models
from bookings.domain import AttendanceStatus, HistoryCategory, ReservationStatus, UserStatus
from bookings.domain.errors import ErrorCode
from bookings.services import AuditTrail, CapacityLedger, build_reservation_service


def history(user, category):
    return list(
        models.HistoryEntry.objects.filter(user=user, category=category.value)
        .order_by("id")
        .values_list("description", flat=True)
    )


@pytest.mark.django_db
class TestCreate:
    """Tests for ReservationService.create."""

    def test_create_confirms_and_takes_a_seat(self, reservation_service, member, event, seats_left):
        result = reservation_service.create(member.pk, event.pk)

        assert result.ok
        reservation = result.value
        assert reservation.status is ReservationStatus.CONFIRMED
        assert reservation.attendance is AttendanceStatus.PENDING
        assert reservation.sequence_number == 1
        assert seats_left(event) == 9
        assert history(member, HistoryCategory.BOOKING) == ["Booked: Community lunch (#1)"]

    def test_sequence_numbers_are_per_event(self, reservation_service, make_user, make_event):
        first_event, second_event = make_event(), make_event(title="Choir")
        users = [make_user() for _ in range(3)]

        numbers = [reservation_service.create(u.pk, first_event.pk).value.sequence_number for u in users]
        other = reservation_service.create(users[0].pk, second_event.pk).value.sequence_number

        assert numbers == [1, 2, 3]
        assert other == 1

    def test_duplicate_confirmed_reservation(self, reservation_service, member, event, seats_left):
        reservation_service.create(member.pk, event.pk)
        result = reservation_service.create(member.pk, event.pk)

        assert result.error.code is ErrorCode.DUPLICATE_ACTIVE
        assert seats_left(event) == 9
        assert models.Reservation.objects.filter(user=member, event=event).count() == 1

    def test_duplicate_present_reservation(self, reservation_service, member, event):
        created = reservation_service.create(member.pk, event.pk).value
        reservation_service.record_presence(created.id)

        result = reservation_service.create(member.pk, event.pk)
        assert result.error.code is ErrorCode.DUPLICATE_ACTIVE

    def test_absent_reservation_cannot_be_rebooked(self, reservation_service, member, event, seats_left):
        """An absence closes the booking cycle for the pair."""
        created = reservation_service.create(member.pk, event.pk).value
        reservation_service.record_absence(created.id)

        result = reservation_service.create(member.pk, event.pk)

        assert result.error.code is ErrorCode.INVALID_STATE
        assert seats_left(event) == 9

    def test_full_event(self, reservation_service, member, make_event):
        event = make_event(capacity=0)
        result = reservation_service.create(member.pk, event.pk)
        assert result.error.code is ErrorCode.NO_CAPACITY

    def test_unknown_event(self, reservation_service, member):
        result = reservation_service.create(member.pk, 999)
        assert result.error.code is ErrorCode.NOT_FOUND

    def test_malformed_event_id(self, reservation_service, member):
        result = reservation_service.create(member.pk, "abc")
        assert result.error.code is ErrorCode.INVALID_ID

    def test_sequential_requests_never_overbook(self, reservation_service, make_user, make_event, seats_left):
        """With 3 seats, only 3 of 5 users get one."""
        event = make_event(capacity=3)
        results = [reservation_service.create(make_user().pk, event.pk) for _ in range(5)]

        assert [r.ok for r in results] == [True, True, True, False, False]
        assert {r.error.code for r in results if not r.ok} == {ErrorCode.NO_CAPACITY}
        assert seats_left(event) == 0
        assert models.Reservation.objects.filter(event=event).count() == 3

    def test_guarded_decrement_refuses_a_stale_availability_check(
        self, reservation_service, member, make_event, seats_left, monkeypatch
    ):
        """If the availability check passed on stale data, the guarded update
        still refuses and the inserted row is rolled back."""
        event = make_event(capacity=1, available_capacity=0)
        monkeypatch.setattr(CapacityLedger, "has_availability", lambda self, event_id: True)

        result = reservation_service.create(member.pk, event.pk)

        assert result.error.code is ErrorCode.NO_CAPACITY
        assert seats_left(event) == 0
        assert not models.Reservation.objects.filter(event=event).exists()

    def test_history_failure_rolls_back_everything(
        self, reservation_service, member, event, seats_left, monkeypatch
    ):
        def fail(*args, **kwargs):
            raise DatabaseError("history table unavailable")

        monkeypatch.setattr(AuditTrail, "booked", fail)

        result = reservation_service.create(member.pk, event.pk)

        assert result.error.code is ErrorCode.STORAGE_FAILURE
        assert seats_left(event) == 10
        assert not models.Reservation.objects.filter(event=event).exists()


@pytest.mark.django_db
class TestCancel:
    """Tests for ReservationService.cancel."""

    def test_cancel_gives_the_seat_back(self, reservation_service, member, event, seats_left, clock):
        created = reservation_service.create(member.pk, event.pk).value

        result = reservation_service.cancel(created.id, member.pk)

        assert result.ok
        assert result.value.status is ReservationStatus.CANCELLED
        assert result.value.cancelled_at == clock()
        assert seats_left(event) == 10
        assert history(member, HistoryCategory.CANCELLATION) == ["Cancelled: Community lunch"]

    def test_exactly_24_hours_needs_no_justification(self, reservation_service, member, make_event, clock):
        event = make_event(starts_at=clock() + timedelta(hours=24))
        created = reservation_service.create(member.pk, event.pk).value

        assert reservation_service.cancel(created.id, member.pk).ok

    def test_less_than_24_hours_needs_justification(
        self, reservation_service, member, make_event, clock, seats_left
    ):
        event = make_event(starts_at=clock() + timedelta(hours=23, minutes=59))
        created = reservation_service.create(member.pk, event.pk).value

        result = reservation_service.cancel(created.id, member.pk, "   ")

        assert result.error.code is ErrorCode.MISSING_JUSTIFICATION
        assert seats_left(event) == 9
        assert models.Reservation.objects.get(pk=created.id.value).status == "confirmed"

    def test_late_cancellation_with_justification(self, reservation_service, member, make_event, clock):
        """The justification is appended to the notes and recorded in history."""
        event = make_event(starts_at=clock() + timedelta(hours=2))
        created = reservation_service.create(member.pk, event.pk).value
        models.Reservation.objects.filter(pk=created.id.value).update(notes="wheelchair access")

        result = reservation_service.cancel(created.id, member.pk, " bus strike ")

        assert result.ok
        assert result.value.notes == "wheelchair access | bus strike"
        assert history(member, HistoryCategory.CANCELLATION) == [
            "Cancelled: Community lunch - Justification: bus strike"
        ]

    def test_other_member_is_forbidden(self, reservation_service, member, other_member, event):
        created = reservation_service.create(member.pk, event.pk).value
        result = reservation_service.cancel(created.id, other_member.pk)
        assert result.error.code is ErrorCode.FORBIDDEN

    def test_admin_can_cancel_for_a_member(self, reservation_service, member, admin_user, event, seats_left):
        created = reservation_service.create(member.pk, event.pk).value
        assert reservation_service.cancel(created.id, admin_user.pk).ok
        assert seats_left(event) == 10

    def test_cancelled_reservation_cannot_be_cancelled_again(
        self, reservation_service, member, event, seats_left
    ):
        created = reservation_service.create(member.pk, event.pk).value
        reservation_service.cancel(created.id, member.pk)

        result = reservation_service.cancel(created.id, member.pk)

        assert result.error.code is ErrorCode.INVALID_STATE
        assert seats_left(event) == 10

    def test_unknown_reservation(self, reservation_service, member):
        result = reservation_service.cancel(999, member.pk)
        assert result.error.code is ErrorCode.NOT_FOUND


@pytest.mark.django_db
class TestBookCancelRebook:
    """A seat freed by a cancellation can be booked again by its holder."""

    def test_full_cycle_on_single_seat_event(
        self, reservation_service, member, other_member, make_event, seats_left
    ):
        event = make_event(capacity=1)

        first = reservation_service.create(member.pk, event.pk)
        assert first.ok
        assert seats_left(event) == 0

        blocked = reservation_service.create(other_member.pk, event.pk)
        assert blocked.error.code is ErrorCode.NO_CAPACITY

        cancelled = reservation_service.cancel(first.value.id, member.pk)
        assert cancelled.value.status is ReservationStatus.CANCELLED
        assert seats_left(event) == 1

        rebooked = reservation_service.create(member.pk, event.pk)
        assert rebooked.ok
        assert rebooked.value.id == first.value.id
        assert rebooked.value.sequence_number == first.value.sequence_number
        assert rebooked.value.status is ReservationStatus.CONFIRMED
        assert rebooked.value.cancelled_at is None
        assert seats_left(event) == 0
        assert models.Reservation.objects.filter(event=event).count() == 1


@pytest.mark.django_db
class TestAttendance:
    """Tests for record_presence and record_absence."""

    def test_presence_keeps_capacity_and_streak(self, reservation_service, make_user, event, seats_left, clock):
        user = make_user(consecutive_absences=2, total_absences=2)
        created = reservation_service.create(user.pk, event.pk).value

        result = reservation_service.record_presence(created.id)

        assert result.value.status is ReservationStatus.PRESENT
        assert result.value.attendance is AttendanceStatus.CONFIRMED
        assert result.value.present_at == clock()
        assert seats_left(event) == 9
        user.refresh_from_db()
        assert user.consecutive_absences == 2
        assert history(user, HistoryCategory.PRESENCE) == ["Present: Community lunch"]

    def test_absence_counts_against_the_user(self, reservation_service, member, event, seats_left):
        created = reservation_service.create(member.pk, event.pk).value

        result = reservation_service.record_absence(created.id)

        assert result.value.status is ReservationStatus.ABSENT
        assert result.value.attendance is AttendanceStatus.ABSENT
        assert seats_left(event) == 9
        member.refresh_from_db()
        assert member.consecutive_absences == 1
        assert member.total_absences == 1

    def test_absence_cannot_be_recorded_twice(self, reservation_service, member, event):
        created = reservation_service.create(member.pk, event.pk).value
        reservation_service.record_absence(created.id)

        result = reservation_service.record_absence(created.id)

        assert result.error.code is ErrorCode.INVALID_STATE
        member.refresh_from_db()
        assert member.total_absences == 1

    def test_cancelled_reservation_cannot_be_marked_present(self, reservation_service, member, event):
        created = reservation_service.create(member.pk, event.pk).value
        reservation_service.cancel(created.id, member.pk)

        result = reservation_service.record_presence(created.id)
        assert result.error.code is ErrorCode.INVALID_STATE

    def test_three_absences_lock_the_account(self, reservation_service, member, make_event, clock):
        events = [make_event(title=f"Event {n}") for n in range(3)]
        for event in events:
            created = reservation_service.create(member.pk, event.pk).value
            reservation_service.record_absence(created.id)

        member.refresh_from_db()
        assert member.status == UserStatus.LOCKED.value
        assert member.locked_until == clock() + timedelta(days=30)
        assert member.consecutive_absences == 0
        assert member.total_absences == 3
        assert len(history(member, HistoryCategory.ABSENCE)) == 3
        assert len(history(member, HistoryCategory.LOCKOUT)) == 1


@pytest.mark.django_db
class TestReads:
    """Tests for get_by_id, list_by_user and user_statistics."""

    def test_owner_can_read_reservation(self, reservation_service, member, event):
        created = reservation_service.create(member.pk, event.pk).value

        result = reservation_service.get_by_id(created.id, member.pk)

        assert result.value.reservation == created
        assert result.value.event.id.value == event.pk

    def test_admin_can_read_any_reservation(self, reservation_service, member, admin_user, event):
        created = reservation_service.create(member.pk, event.pk).value
        assert reservation_service.get_by_id(created.id, admin_user.pk).ok

    def test_other_member_cannot_read_reservation(self, reservation_service, member, other_member, event):
        created = reservation_service.create(member.pk, event.pk).value
        result = reservation_service.get_by_id(created.id, other_member.pk)
        assert result.error.code is ErrorCode.FORBIDDEN

    def test_missing_reservation(self, reservation_service, member):
        assert reservation_service.get_by_id(999, member.pk).error.code is ErrorCode.NOT_FOUND

    def test_list_is_ordered_by_event_date_descending(
        self, reservation_service, member, other_member, make_event, clock
    ):
        soon = make_event(starts_at=clock() + timedelta(days=1), title="Soon")
        later = make_event(starts_at=clock() + timedelta(days=9), title="Later")
        middle = make_event(starts_at=clock() + timedelta(days=4), title="Middle")
        for event in (soon, later, middle):
            reservation_service.create(member.pk, event.pk)
        reservation_service.create(other_member.pk, soon.pk)

        listing = reservation_service.list_by_user(member.pk).value

        assert [item.event.title for item in listing] == ["Later", "Middle", "Soon"]

    def test_statistics(self, reservation_service, member, make_event):
        events = [make_event(title=f"Event {n}") for n in range(4)]
        ids = [reservation_service.create(member.pk, e.pk).value.id for e in events]
        reservation_service.record_presence(ids[0])
        reservation_service.record_absence(ids[1])
        reservation_service.cancel(ids[2], member.pk)

        stats = reservation_service.user_statistics(member.pk).value

        assert stats.total == 3
        assert stats.present == 1
        assert stats.absent == 1
        assert stats.cancelled == 1
        assert stats.presence_rate == 33


@pytest.mark.django_db(transaction=True)
class TestConcurrentCreate:
    """Simultaneous requests for the last seat, each on its own connection."""

    def test_one_winner_for_the_last_seat(self, make_user, make_event, seats_left, clock):
        event = make_event(capacity=1)
        users = [make_user() for _ in range(8)]
        barrier = threading.Barrier(len(users))
        results = [None] * len(users)

        def book(index, user):
            service = build_reservation_service(clock)
            try:
                barrier.wait()
                results[index] = service.create(user.pk, event.pk)
            finally:
                connection.close()

        threads = [threading.Thread(target=book, args=(i, u)) for i, u in enumerate(users)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert all(result is not None for result in results)
        assert sum(result.ok for result in results) == 1
        assert sorted(result.error.code.value for result in results if not result.ok) == (
            [ErrorCode.NO_CAPACITY.value] * (len(users) - 1)
        )
        assert seats_left(event) == 0
        assert models.Reservation.objects.filter(event=event).count() == 1
