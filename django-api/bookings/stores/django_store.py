"""Django ORM implementation of the stores.

Each method queries the Django ORM and converts rows to domain models.
Row locks use SELECT ... FOR UPDATE and seat counters move through guarded
UPDATE statements, so both only hold inside a transaction opened by
DjangoTransactionScope.
"""

from contextlib import AbstractContextManager
from datetime import date, datetime

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Max
from django.utils import timezone

from bookings import models
from bookings.domain import (
    AttendanceStatus,
    Capacity,
    Event,
    EventDraft,
    EventId,
    EventPatch,
    EventStatus,
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
    UserStatus,
)
from bookings.domain.errors import DuplicateActiveError, EmailTakenError
from bookings.stores.interfaces import (
    EventStore,
    HistoryStore,
    ReservationStore,
    TransactionScope,
    UserStore,
)


def to_domain_user(obj: models.User) -> User:
    return User(
        id=UserId(obj.pk),
        name=obj.name,
        email=obj.email,
        phone=obj.phone,
        role=Role(obj.role),
        status=UserStatus(obj.status),
        locked_until=obj.locked_until,
        consecutive_absences=obj.consecutive_absences,
        total_absences=obj.total_absences,
        date_joined=obj.date_joined,
        last_login=obj.last_login,
    )


def to_domain_event(obj: models.Event) -> Event:
    starts_at = timezone.make_aware(
        datetime.combine(obj.event_date, obj.event_time),
        timezone.get_default_timezone(),
    )
    return Event(
        id=EventId(obj.pk),
        title=obj.title,
        description=obj.description,
        event_date=obj.event_date,
        event_time=obj.event_time,
        starts_at=starts_at,
        location=obj.location,
        capacity=Capacity(total=obj.total_capacity, available=obj.available_capacity),
        status=EventStatus(obj.status),
        gate_opens_at=obj.gate_opens_at,
        notes=obj.notes,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


def to_domain_reservation(obj: models.Reservation) -> Reservation:
    return Reservation(
        id=ReservationId(obj.pk),
        user_id=UserId(obj.user_id),
        event_id=EventId(obj.event_id),
        sequence_number=obj.sequence_number,
        status=ReservationStatus(obj.status),
        attendance=AttendanceStatus(obj.attendance),
        created_at=obj.created_at,
        cancelled_at=obj.cancelled_at,
        present_at=obj.present_at,
        notes=obj.notes,
    )


def to_domain_history(obj: models.HistoryEntry) -> HistoryEntry:
    return HistoryEntry(
        id=obj.pk,
        user_id=UserId(obj.user_id),
        category=HistoryCategory(obj.category),
        description=obj.description,
        created_at=obj.created_at,
    )


class DjangoTransactionScope(TransactionScope):
    """Transactions on the default database connection."""

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()


class DjangoEventStore(EventStore):
    """Event store backed by the Django ORM."""

    def list_available(self, today: date) -> list[Event]:
        queryset = models.Event.objects.filter(
            status=EventStatus.ACTIVE.value,
            event_date__gte=today,
            available_capacity__gt=0,
        ).order_by("event_date", "event_time")
        return [to_domain_event(obj) for obj in queryset]

    def list_events(self) -> list[Event]:
        return [to_domain_event(obj) for obj in models.Event.objects.order_by("event_date", "event_time")]

    def get_event(self, event_id: EventId) -> Event | None:
        obj = models.Event.objects.filter(pk=event_id.value).first()
        return to_domain_event(obj) if obj is not None else None

    def lock_event(self, event_id: EventId) -> Event | None:
        obj = models.Event.objects.select_for_update().filter(pk=event_id.value).first()
        return to_domain_event(obj) if obj is not None else None

    def create_event(self, draft: EventDraft) -> Event:
        obj = models.Event.objects.create(
            title=draft.title,
            description=draft.description,
            event_date=draft.event_date,
            event_time=draft.event_time,
            gate_opens_at=draft.gate_opens_at,
            location=draft.location,
            total_capacity=draft.total_capacity,
            available_capacity=draft.total_capacity,
            notes=draft.notes,
        )
        return to_domain_event(obj)

    def update_event(self, event_id: EventId, patch: EventPatch) -> Event | None:
        obj = models.Event.objects.filter(pk=event_id.value).first()
        if obj is None:
            return None
        changes = patch.changes()
        for name, value in changes.items():
            setattr(obj, name, value.value if isinstance(value, EventStatus) else value)
        obj.save(update_fields=[*changes, "updated_at"])
        return to_domain_event(obj)

    def delete_event(self, event_id: EventId) -> bool:
        obj = models.Event.objects.filter(pk=event_id.value).first()
        if obj is None:
            return False
        obj.delete()
        return True

    def take_seat(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, available_capacity__gt=0
        ).update(available_capacity=F("available_capacity") - 1)
        return updated == 1

    def release_seat(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, available_capacity__lt=F("total_capacity")
        ).update(available_capacity=F("available_capacity") + 1)
        return updated == 1


class DjangoUserStore(UserStore):
    """User store backed by the Django ORM."""

    def get_user(self, user_id: UserId) -> User | None:
        obj = models.User.objects.filter(pk=user_id.value).first()
        return to_domain_user(obj) if obj is not None else None

    def lock_user(self, user_id: UserId) -> User | None:
        obj = models.User.objects.select_for_update().filter(pk=user_id.value).first()
        return to_domain_user(obj) if obj is not None else None

    def list_users(self) -> list[User]:
        return [to_domain_user(obj) for obj in models.User.objects.order_by("-date_joined")]

    def find_credentials(self, email: str) -> tuple[User, str] | None:
        obj = models.User.objects.filter(email__iexact=email.strip()).first()
        if obj is None:
            return None
        return to_domain_user(obj), obj.password

    def get_password_hash(self, user_id: UserId) -> str | None:
        return models.User.objects.filter(pk=user_id.value).values_list("password", flat=True).first()

    def create_user(
        self, name: str, email: str, phone: str, password_hash: str, role: Role
    ) -> User:
        try:
            with transaction.atomic():
                obj = models.User.objects.create(
                    name=name,
                    email=email,
                    phone=phone,
                    password=password_hash,
                    role=role.value,
                )
        except IntegrityError as exc:
            raise EmailTakenError() from exc
        return to_domain_user(obj)

    def save_reliability(self, user: User) -> None:
        models.User.objects.filter(pk=user.id.value).update(
            status=user.status.value,
            locked_until=user.locked_until,
            consecutive_absences=user.consecutive_absences,
            total_absences=user.total_absences,
        )

    def update_profile(self, user_id: UserId, patch: ProfilePatch) -> User | None:
        obj = models.User.objects.filter(pk=user_id.value).first()
        if obj is None:
            return None
        changes = patch.changes()
        for name, value in changes.items():
            setattr(obj, name, value)
        obj.save(update_fields=list(changes))
        return to_domain_user(obj)

    def set_password_hash(self, user_id: UserId, password_hash: str) -> None:
        models.User.objects.filter(pk=user_id.value).update(password=password_hash)

    def touch_last_login(self, user_id: UserId, at: datetime) -> None:
        models.User.objects.filter(pk=user_id.value).update(last_login=at)


class DjangoReservationStore(ReservationStore):
    """Reservation store backed by the Django ORM."""

    def get_reservation(self, reservation_id: ReservationId) -> Reservation | None:
        obj = models.Reservation.objects.filter(pk=reservation_id.value).first()
        return to_domain_reservation(obj) if obj is not None else None

    def lock_reservation(self, reservation_id: ReservationId) -> Reservation | None:
        obj = models.Reservation.objects.select_for_update().filter(pk=reservation_id.value).first()
        return to_domain_reservation(obj) if obj is not None else None

    def find_for_pair(self, user_id: UserId, event_id: EventId) -> Reservation | None:
        obj = (
            models.Reservation.objects.select_for_update()
            .filter(user_id=user_id.value, event_id=event_id.value)
            .first()
        )
        return to_domain_reservation(obj) if obj is not None else None

    def next_sequence_number(self, event_id: EventId) -> int:
        highest = models.Reservation.objects.filter(event_id=event_id.value).aggregate(
            highest=Max("sequence_number")
        )["highest"]
        return (highest or 0) + 1

    def insert(self, user_id: UserId, event_id: EventId, sequence_number: int) -> Reservation:
        try:
            with transaction.atomic():
                obj = models.Reservation.objects.create(
                    user_id=user_id.value,
                    event_id=event_id.value,
                    sequence_number=sequence_number,
                    status=ReservationStatus.CONFIRMED.value,
                    attendance=AttendanceStatus.PENDING.value,
                )
        except IntegrityError:
            pair_taken = models.Reservation.objects.filter(
                user_id=user_id.value, event_id=event_id.value
            ).exists()
            if pair_taken:
                raise DuplicateActiveError() from None
            raise
        return to_domain_reservation(obj)

    def save(self, reservation: Reservation) -> None:
        obj = models.Reservation.objects.get(pk=reservation.id.value)
        obj.status = reservation.status.value
        obj.attendance = reservation.attendance.value
        obj.cancelled_at = reservation.cancelled_at
        obj.present_at = reservation.present_at
        obj.notes = reservation.notes
        obj.save(update_fields=["status", "attendance", "cancelled_at", "present_at", "notes"])

    def list_for_user(self, user_id: UserId) -> list[UserReservation]:
        queryset = (
            models.Reservation.objects.select_related("event")
            .filter(user_id=user_id.value)
            .order_by("-event__event_date", "-event__event_time")
        )
        return [
            UserReservation(reservation=to_domain_reservation(obj), event=to_domain_event(obj.event))
            for obj in queryset
        ]

    def _count_by_status(self, **filters) -> dict[ReservationStatus, int]:
        rows = (
            models.Reservation.objects.filter(**filters)
            .order_by()
            .values("status")
            .annotate(total=Count("id"))
        )
        return {ReservationStatus(row["status"]): row["total"] for row in rows}

    def count_by_status_for_user(self, user_id: UserId) -> dict[ReservationStatus, int]:
        return self._count_by_status(user_id=user_id.value)

    def count_by_status_for_event(self, event_id: EventId) -> dict[ReservationStatus, int]:
        return self._count_by_status(event_id=event_id.value)

    def seat_holders(self, user_id: UserId) -> set[EventId]:
        event_ids = models.Reservation.objects.filter(
            user_id=user_id.value,
            status__in=[status.value for status in ReservationStatus if status.holds_seat],
        ).values_list("event_id", flat=True)
        return {EventId(event_id) for event_id in event_ids}


class DjangoHistoryStore(HistoryStore):
    """Audit trail backed by the Django ORM."""

    def append(self, user_id: UserId, category: HistoryCategory, description: str) -> HistoryEntry:
        obj = models.HistoryEntry.objects.create(
            user_id=user_id.value,
            category=category.value,
            description=description,
        )
        return to_domain_history(obj)

    def list_for_user(self, user_id: UserId) -> list[HistoryEntry]:
        queryset = models.HistoryEntry.objects.filter(user_id=user_id.value).order_by("-created_at", "-id")
        return [to_domain_history(obj) for obj in queryset]
