"""Status vocabularies shared by the domain and persistence layers."""

from enum import Enum


class ReservationStatus(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    PRESENT = "present"
    ABSENT = "absent"

    @property
    def holds_seat(self) -> bool:
        """Whether a reservation in this status counts against capacity."""
        return self in (ReservationStatus.CONFIRMED, ReservationStatus.PRESENT)


class AttendanceStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ABSENT = "absent"


class UserStatus(Enum):
    ACTIVE = "active"
    LOCKED = "locked"


class Role(Enum):
    MEMBER = "member"
    ADMIN = "admin"


class EventStatus(Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class HistoryCategory(Enum):
    BOOKING = "agendamento"
    CANCELLATION = "cancelamento"
    PRESENCE = "presenca"
    ABSENCE = "falta"
    LOCKOUT = "bloqueio"
    UNLOCK = "desbloqueio"


def choices(enum_cls: type[Enum]) -> list[tuple[str, str]]:
    """Django `choices` for an enum: (value, humanised name)."""
    return [(member.value, member.name.replace("_", " ").title()) for member in enum_cls]
