from bookings.domain.enums import (
    AttendanceStatus,
    EventStatus,
    HistoryCategory,
    ReservationStatus,
    Role,
    UserStatus,
)
from bookings.domain.models import (
    Event,
    EventStatistics,
    HistoryEntry,
    Reservation,
    User,
    UserReservation,
    UserStatistics,
)
from bookings.domain.results import Result
from bookings.domain.value_objects import (
    CancellationPolicy,
    Capacity,
    EventDraft,
    EventId,
    EventPatch,
    Justification,
    ProfilePatch,
    ReliabilityPolicy,
    ReservationId,
    UserId,
)

__all__ = [
    "AttendanceStatus",
    "EventStatus",
    "HistoryCategory",
    "ReservationStatus",
    "Role",
    "UserStatus",
    "Event",
    "EventStatistics",
    "HistoryEntry",
    "Reservation",
    "User",
    "UserReservation",
    "UserStatistics",
    "Result",
    "CancellationPolicy",
    "Capacity",
    "EventDraft",
    "EventId",
    "EventPatch",
    "Justification",
    "ProfilePatch",
    "ReliabilityPolicy",
    "ReservationId",
    "UserId",
]
