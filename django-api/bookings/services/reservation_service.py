"""Reservation service - the booking lifecycle lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return Results carrying domain models or domain errors

Each state change runs in one transaction together with its capacity
movement and its history entry, so a failure leaves no partial effects.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from bookings.domain import (
    CancellationPolicy,
    EventId,
    Justification,
    Reservation,
    ReservationId,
    ReservationStatus,
    User,
    UserId,
    UserReservation,
    UserStatistics,
)
from bookings.domain.errors import (
    DuplicateActiveError,
    EventNotFoundError,
    ForbiddenError,
    InvalidStateError,
    MissingJustificationError,
    NoCapacityError,
    ReservationNotFoundError,
    UserNotFoundError,
)
from bookings.services.audit_trail import AuditTrail
from bookings.services.boundary import as_result, parse_id
from bookings.services.capacity_ledger import CapacityLedger
from bookings.services.reliability_tracker import ReliabilityTracker
from bookings.stores.interfaces import EventStore, ReservationStore, TransactionScope, UserStore

logger = logging.getLogger(__name__)


class ReservationService:
    """Service for the reservation state machine."""

    def __init__(
        self,
        reservations: ReservationStore,
        events: EventStore,
        users: UserStore,
        transactions: TransactionScope,
        ledger: CapacityLedger,
        tracker: ReliabilityTracker,
        audit: AuditTrail,
        policy: CancellationPolicy,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._reservations = reservations
        self._events = events
        self._users = users
        self._tx = transactions
        self._ledger = ledger
        self._tracker = tracker
        self._audit = audit
        self._policy = policy
        self._clock = clock

    def _get_user(self, user_id: UserId) -> User:
        user = self._users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _locked_reservation(self, reservation_id: ReservationId) -> Reservation:
        reservation = self._reservations.lock_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    @as_result
    def create(self, user_id: int | str, event_id: int | str) -> Reservation:
        """Book one seat for the user at the event.

        A cancelled row for the same pair is reactivated in place and keeps
        its sequence number; otherwise a new row gets the next number.

        Raises:
            EventNotFoundError: If the event does not exist.
            DuplicateActiveError: If the user already holds a seat there.
            NoCapacityError: If the event has no seat left.
            InvalidStateError: If attendance for the pair was already recorded.
        """
        uid = parse_id(UserId, user_id, "user")
        eid = parse_id(EventId, event_id, "event")
        with self._tx.atomic():
            event = self._events.lock_event(eid)
            if event is None:
                raise EventNotFoundError(eid)
            existing = self._reservations.find_for_pair(uid, eid)
            if existing is not None and existing.status.holds_seat:
                raise DuplicateActiveError()
            if not self._ledger.has_availability(eid):
                raise NoCapacityError()

            if existing is None:
                sequence_number = self._reservations.next_sequence_number(eid)
                reservation = self._reservations.insert(uid, eid, sequence_number)
            else:
                reservation = existing.reactivated()
                self._reservations.save(reservation)

            self._ledger.decrement(eid)
            self._audit.booked(uid, event, reservation.sequence_number)

        logger.info(
            "Reservation %s (#%d) confirmed for user %s at event %s",
            reservation.id,
            reservation.sequence_number,
            uid,
            eid,
        )
        return reservation

    @as_result
    def cancel(
        self,
        reservation_id: int | str,
        acting_user_id: int | str,
        justification: str | None = None,
    ) -> Reservation:
        """Cancel a confirmed reservation and give its seat back.

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            ForbiddenError: If the actor is neither the owner nor an admin.
            InvalidStateError: If the reservation is not confirmed.
            MissingJustificationError: If the event is closer than the notice
                period and no justification was given.
        """
        rid = parse_id(ReservationId, reservation_id, "reservation")
        actor_id = parse_id(UserId, acting_user_id, "user")
        reason = Justification.from_input(justification)
        with self._tx.atomic():
            reservation = self._locked_reservation(rid)
            actor = self._get_user(actor_id)
            if reservation.user_id != actor.id and not actor.is_admin:
                raise ForbiddenError("You are not allowed to cancel this reservation.")
            if not reservation.can_transition_to(ReservationStatus.CANCELLED):
                raise InvalidStateError("Only confirmed reservations can be cancelled.")

            event = self._events.get_event(reservation.event_id)
            if event is None:
                raise EventNotFoundError(reservation.event_id)
            now = self._clock()
            if reason is None and self._policy.requires_justification(event.starts_at, now):
                raise MissingJustificationError(self._policy.notice_hours)

            cancelled = reservation.cancelled(now, reason)
            self._reservations.save(cancelled)
            self._ledger.increment(event.id)
            self._audit.cancelled(reservation.user_id, event, reason)

        logger.info("Reservation %s cancelled by user %s", rid, actor_id)
        return cancelled

    @as_result
    def record_presence(self, reservation_id: int | str) -> Reservation:
        """Mark the holder present. Capacity and reliability are not touched."""
        rid = parse_id(ReservationId, reservation_id, "reservation")
        with self._tx.atomic():
            reservation = self._locked_reservation(rid)
            event = self._events.get_event(reservation.event_id)
            if event is None:
                raise EventNotFoundError(reservation.event_id)
            present = reservation.marked_present(self._clock())
            self._reservations.save(present)
            self._audit.present(reservation.user_id, event)

        logger.info("Reservation %s marked present", rid)
        return present

    @as_result
    def record_absence(self, reservation_id: int | str) -> Reservation:
        """Mark the holder absent and count the absence against them."""
        rid = parse_id(ReservationId, reservation_id, "reservation")
        with self._tx.atomic():
            reservation = self._locked_reservation(rid)
            event = self._events.get_event(reservation.event_id)
            if event is None:
                raise EventNotFoundError(reservation.event_id)
            absent = reservation.marked_absent()
            self._reservations.save(absent)
            self._audit.absent(reservation.user_id, event)
            self._tracker.record_absence(reservation.user_id)

        logger.info("Reservation %s marked absent", rid)
        return absent

    @as_result
    def get_by_id(self, reservation_id: int | str, acting_user_id: int | str) -> UserReservation:
        """Return a reservation with its event, for its owner or an admin."""
        rid = parse_id(ReservationId, reservation_id, "reservation")
        actor = self._get_user(parse_id(UserId, acting_user_id, "user"))
        reservation = self._reservations.get_reservation(rid)
        if reservation is None:
            raise ReservationNotFoundError(rid)
        if reservation.user_id != actor.id and not actor.is_admin:
            raise ForbiddenError("You are not allowed to see this reservation.")
        event = self._events.get_event(reservation.event_id)
        if event is None:
            raise EventNotFoundError(reservation.event_id)
        return UserReservation(reservation=reservation, event=event)

    @as_result
    def list_by_user(self, user_id: int | str) -> list[UserReservation]:
        """Return the user's reservations, latest event first."""
        return self._reservations.list_for_user(parse_id(UserId, user_id, "user"))

    @as_result
    def user_statistics(self, user_id: int | str) -> UserStatistics:
        uid = parse_id(UserId, user_id, "user")
        return UserStatistics.from_counts(self._reservations.count_by_status_for_user(uid))

