"""Read-only reports for administrators."""

from bookings.domain import EventId, EventStatistics
from bookings.domain.errors import EventNotFoundError
from bookings.domain.models import AttendanceSheetRow, ReservationReportRow, UserReportRow
from bookings.services.boundary import as_result, parse_id
from bookings.stores.interfaces import EventStore, ReportStore, ReservationStore


class ReportService:
    """Projections over events, users and reservations. Nothing here writes."""

    def __init__(
        self,
        reports: ReportStore,
        events: EventStore,
        reservations: ReservationStore,
    ) -> None:
        self._reports = reports
        self._events = events
        self._reservations = reservations

    def _optional_event(self, event_id: int | str | None) -> EventId | None:
        if event_id in (None, ""):
            return None
        return parse_id(EventId, event_id, "event")

    @as_result
    def event_statistics(self, event_id: int | str) -> EventStatistics:
        eid = parse_id(EventId, event_id, "event")
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(eid)
        return EventStatistics.from_counts(event, self._reservations.count_by_status_for_event(eid))

    @as_result
    def reservations_report(self, event_id: int | str | None = None) -> list[ReservationReportRow]:
        return self._reports.reservations_report(self._optional_event(event_id))

    @as_result
    def users_report(self) -> list[UserReportRow]:
        return self._reports.users_report()

    @as_result
    def attendance_sheet(self, event_id: int | str | None = None) -> list[AttendanceSheetRow]:
        return self._reports.attendance_sheet(self._optional_event(event_id))
