"""Account service - registration, login and profile management.

Login is where the reliability lock is enforced: an expired lock is lifted
before the user gets in, an active one refuses the login.
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime

from django.contrib.auth.hashers import check_password, make_password
from django.utils import timezone

from bookings.domain import HistoryEntry, ProfilePatch, Role, User, UserId
from bookings.domain.errors import (
    InvalidCredentialsError,
    NothingToUpdateError,
    UserNotFoundError,
    WeakPasswordError,
)
from bookings.services.audit_trail import AuditTrail
from bookings.services.boundary import as_result, parse_id
from bookings.services.reliability_tracker import ReliabilityTracker
from bookings.stores.interfaces import TransactionScope, UserStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def is_strong_password(password: str | None) -> bool:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return all(pattern.search(password) for pattern in (_LETTER, _DIGIT, _SPECIAL))


class AccountService:
    """Service for user accounts."""

    def __init__(
        self,
        users: UserStore,
        transactions: TransactionScope,
        tracker: ReliabilityTracker,
        audit: AuditTrail,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._users = users
        self._tx = transactions
        self._tracker = tracker
        self._audit = audit
        self._clock = clock

    def _get_user(self, user_id: UserId) -> User:
        user = self._users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    @as_result
    def register(self, name: str, email: str, password: str, phone: str = "") -> User:
        """Create a member account.

        Raises:
            WeakPasswordError: If the password fails the strength rules.
            EmailTakenError: If the email is already registered.
        """
        if not is_strong_password(password):
            raise WeakPasswordError()
        user = self._users.create_user(
            name=name.strip(),
            email=email.strip().lower(),
            phone=(phone or "").strip(),
            password_hash=make_password(password),
            role=Role.MEMBER,
        )
        logger.info("User %s registered", user.id)
        return user

    @as_result
    def authenticate(self, email: str, password: str) -> User:
        """Check credentials, then the reliability lock.

        Raises:
            InvalidCredentialsError: If the email or password does not match.
            AccountLockedError: If the account is locked and the lock has not expired.
        """
        with self._tx.atomic():
            found = self._users.find_credentials(email)
            if found is None:
                raise InvalidCredentialsError()
            user, password_hash = found
            if not check_password(password, password_hash):
                raise InvalidCredentialsError()
            user = self._tracker.check_and_auto_unlock(user)
            self._users.touch_last_login(user.id, self._clock())
        logger.info("User %s logged in", user.id)
        return user

    @as_result
    def get_profile(self, user_id: int | str) -> User:
        return self._get_user(parse_id(UserId, user_id, "user"))

    @as_result
    def update_profile(self, user_id: int | str, patch: ProfilePatch) -> User:
        uid = parse_id(UserId, user_id, "user")
        if patch.is_empty():
            raise NothingToUpdateError()
        user = self._users.update_profile(uid, patch)
        if user is None:
            raise UserNotFoundError(uid)
        return user

    @as_result
    def change_password(self, user_id: int | str, current: str, new: str) -> None:
        """Replace the password after verifying the current one.

        Raises:
            InvalidCredentialsError: If the current password is wrong.
            WeakPasswordError: If the new password fails the strength rules.
        """
        uid = parse_id(UserId, user_id, "user")
        password_hash = self._users.get_password_hash(uid)
        if password_hash is None:
            raise UserNotFoundError(uid)
        if not check_password(current, password_hash):
            raise InvalidCredentialsError("The current password is incorrect.")
        if not is_strong_password(new):
            raise WeakPasswordError()
        self._users.set_password_hash(uid, make_password(new))
        logger.info("User %s changed their password", uid)

    @as_result
    def list_users(self) -> list[User]:
        return self._users.list_users()

    @as_result
    def unlock_user(self, user_id: int | str) -> User:
        uid = parse_id(UserId, user_id, "user")
        self._get_user(uid)
        return self._tracker.unlock(uid)

    @as_result
    def clear_absence_streak(self, user_id: int | str) -> User:
        uid = parse_id(UserId, user_id, "user")
        return self._tracker.record_presence(uid)

    @as_result
    def history(self, user_id: int | str) -> list[HistoryEntry]:
        return self._audit.for_user(parse_id(UserId, user_id, "user"))
