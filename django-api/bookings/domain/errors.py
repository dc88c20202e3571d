"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    DUPLICATE_ACTIVE = "DUPLICATE_ACTIVE"
    NO_CAPACITY = "NO_CAPACITY"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_STATE = "INVALID_STATE"
    MISSING_JUSTIFICATION = "MISSING_JUSTIFICATION"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INVALID_ID = "INVALID_ID"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    NOTHING_TO_UPDATE = "NOTHING_TO_UPDATE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class DuplicateActiveError(DomainError):
    """Raised when the user already holds a seat at the event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_ACTIVE,
            message="You already have a reservation for this event.",
        )


class NoCapacityError(DomainError):
    """Raised when an event has no seats left."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_CAPACITY,
            message="There are no seats left for this event.",
        )


class ReservationNotFoundError(DomainError):
    """Raised when a reservation is not found."""

    def __init__(self, reservation_id: object) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message="Reservation not found.")
        self.reservation_id = reservation_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: object) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message="Event not found.")
        self.event_id = event_id


class UserNotFoundError(DomainError):
    """Raised when a user is not found."""

    def __init__(self, user_id: object) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message="User not found.")
        self.user_id = user_id


class ForbiddenError(DomainError):
    """Raised when the acting user neither owns the resource nor is an admin."""

    def __init__(self, message: str = "You are not allowed to do this.") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class InvalidStateError(DomainError):
    """Raised when a reservation is not in the state an operation requires."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)


class MissingJustificationError(DomainError):
    """Raised when a late cancellation comes without a reason."""

    def __init__(self, notice_hours: int) -> None:
        super().__init__(
            code=ErrorCode.MISSING_JUSTIFICATION,
            message=(
                f"Cancelling less than {notice_hours} hours before the event "
                "requires a justification."
            ),
        )


class AccountLockedError(DomainError):
    """Raised on login while the reliability lock is still in force."""

    def __init__(self, days_remaining: int) -> None:
        super().__init__(
            code=ErrorCode.ACCOUNT_LOCKED,
            message=(
                "Your account is locked. It will be unlocked in "
                f"{days_remaining} day(s)."
            ),
        )
        self.days_remaining = days_remaining


class StorageFailureError(DomainError):
    """Raised when the underlying transaction failed and was rolled back."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORAGE_FAILURE,
            message="The operation could not be completed. Please try again.",
        )


class InvalidIdError(DomainError):
    """Raised when an identifier is not a positive integer."""

    def __init__(self, kind: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {kind} ID format")


class InvalidCredentialsError(DomainError):
    """Raised when the email or password does not match."""

    def __init__(self, message: str = "Invalid email or password.") -> None:
        super().__init__(code=ErrorCode.INVALID_CREDENTIALS, message=message)


class EmailTakenError(DomainError):
    """Raised when registering an email that already has an account."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMAIL_TAKEN,
            message="This email is already registered.",
        )


class WeakPasswordError(DomainError):
    """Raised when a password does not meet the strength rules."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.WEAK_PASSWORD,
            message=(
                "The password must have at least 8 characters, "
                "a letter, a digit and a special character."
            ),
        )


class NothingToUpdateError(DomainError):
    """Raised when a partial update carries no fields."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.NOTHING_TO_UPDATE, message="No fields to update.")
