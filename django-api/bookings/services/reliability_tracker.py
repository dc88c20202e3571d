"""Reliability tracker: consecutive absences and the lockout they cause."""

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from bookings.domain import ReliabilityPolicy, User, UserId
from bookings.domain.errors import AccountLockedError, UserNotFoundError
from bookings.services.audit_trail import AuditTrail
from bookings.stores.interfaces import TransactionScope, UserStore

logger = logging.getLogger(__name__)


class ReliabilityTracker:
    """Owns a user's absence counters and lock status.

    Every method runs in its own transaction scope; when called from inside
    another operation it joins that operation's transaction as a savepoint.
    """

    def __init__(
        self,
        users: UserStore,
        transactions: TransactionScope,
        audit: AuditTrail,
        policy: ReliabilityPolicy,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._users = users
        self._tx = transactions
        self._audit = audit
        self._policy = policy
        self._clock = clock

    def _locked_user(self, user_id: UserId) -> User:
        user = self._users.lock_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def record_absence(self, user_id: UserId) -> User:
        """Count an absence; lock the account when the streak hits the limit.

        The lifetime counter is never reset.
        """
        with self._tx.atomic():
            user = self._locked_user(user_id)
            updated = user.with_absence(self._clock(), self._policy)
            self._users.save_reliability(updated)
            if updated.locked_until is not None and updated.locked_until != user.locked_until:
                self._audit.locked(user_id, updated.locked_until)
                logger.info(
                    "User %s locked until %s after %d consecutive absences",
                    user_id,
                    updated.locked_until.isoformat(),
                    self._policy.absence_limit,
                )
        return updated

    def record_presence(self, user_id: UserId) -> User:
        """Reset the consecutive-absence streak. Lock status is left alone."""
        with self._tx.atomic():
            updated = self._locked_user(user_id).with_presence()
            self._users.save_reliability(updated)
        return updated

    def check_and_auto_unlock(self, user: User) -> User:
        """Gate a login on the user's lock.

        Returns the user, unlocked first if the lock has run out.

        Raises:
            AccountLockedError: If the lock expires in the future.
        """
        if not user.is_locked:
            return user
        now = self._clock()
        if not user.lock_expired(now):
            raise AccountLockedError(user.days_until_unlock(now))
        logger.info("Lock of user %s expired, unlocking", user.id)
        return self.unlock(user.id)

    def unlock(self, user_id: UserId) -> User:
        """Unconditionally unlock and reset the absence streak."""
        with self._tx.atomic():
            user = self._locked_user(user_id)
            updated = user.unlocked()
            self._users.save_reliability(updated)
            if user.is_locked:
                self._audit.unlocked(user_id)
        return updated
