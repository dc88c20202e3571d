"""Django ORM implementation of the read-only report projections."""

from django.db.models import Count, Q

from bookings import models
from bookings.domain import EventId, ReservationStatus, UserStatus
from bookings.domain.models import AttendanceSheetRow, ReservationReportRow, UserReportRow
from bookings.stores.interfaces import ReportStore


def _count_status(status: ReservationStatus) -> Count:
    return Count("reservations", filter=Q(reservations__status=status.value))


class DjangoReportStore(ReportStore):
    """Report projections backed by the Django ORM."""

    def reservations_report(self, event_id: EventId | None = None) -> list[ReservationReportRow]:
        queryset = models.Reservation.objects.select_related("user", "event")
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        queryset = queryset.order_by("event__event_date", "created_at", "id")
        return [
            ReservationReportRow(
                reservation_id=obj.pk,
                sequence_number=obj.sequence_number,
                status=ReservationStatus(obj.status),
                booked_at=obj.created_at,
                user_id=obj.user_id,
                user_name=obj.user.name,
                user_email=obj.user.email,
                user_phone=obj.user.phone,
                event_id=obj.event_id,
                event_title=obj.event.title,
                event_date=obj.event.event_date,
            )
            for obj in queryset
        ]

    def users_report(self) -> list[UserReportRow]:
        queryset = models.User.objects.annotate(
            total_reservations=Count("reservations"),
            presences=_count_status(ReservationStatus.PRESENT),
            absences=_count_status(ReservationStatus.ABSENT),
            confirmed=_count_status(ReservationStatus.CONFIRMED),
        ).order_by("-date_joined", "-id")
        return [
            UserReportRow(
                user_id=obj.pk,
                name=obj.name,
                email=obj.email,
                phone=obj.phone,
                status=UserStatus(obj.status),
                date_joined=obj.date_joined,
                total_reservations=obj.total_reservations,
                presences=obj.presences,
                absences=obj.absences,
                confirmed=obj.confirmed,
            )
            for obj in queryset
        ]

    def attendance_sheet(self, event_id: EventId | None = None) -> list[AttendanceSheetRow]:
        queryset = models.Reservation.objects.select_related("user", "event")
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        queryset = queryset.order_by("event__event_date", "user__name", "id")
        return [
            AttendanceSheetRow(
                sequence_number=obj.sequence_number,
                name=obj.user.name,
                event_title=obj.event.title,
                event_date=obj.event.event_date,
                justification=obj.notes,
            )
            for obj in queryset
        ]
