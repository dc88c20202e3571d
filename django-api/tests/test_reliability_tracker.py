"""Tests for the reliability tracker: absence streaks, locks and auto-unlock.

Run with: pytest tests/test_reliability_tracker.py -v
"""

from datetime import timedelta

import pytest

from bookings import models
from bookings.domain import HistoryCategory, UserId, UserStatus
from bookings.domain.errors import AccountLockedError, UserNotFoundError
from bookings.stores.django_store import to_domain_user


def reload(user):
    return to_domain_user(models.User.objects.get(pk=user.pk))


def categories(user):
    return list(
        models.HistoryEntry.objects.filter(user=user).order_by("id").values_list("category", flat=True)
    )


@pytest.mark.django_db
class TestRecordAbsence:
    """Tests for ReliabilityTracker.record_absence."""

    def test_absences_below_limit_only_count(self, reliability_tracker, member):
        reliability_tracker.record_absence(UserId(member.pk))
        reliability_tracker.record_absence(UserId(member.pk))

        user = reload(member)
        assert user.consecutive_absences == 2
        assert user.total_absences == 2
        assert user.status is UserStatus.ACTIVE
        assert categories(member) == []

    def test_third_consecutive_absence_locks_for_thirty_days(self, reliability_tracker, member, clock):
        """The third absence locks the account and resets the streak."""
        for _ in range(3):
            updated = reliability_tracker.record_absence(UserId(member.pk))

        user = reload(member)
        assert user == updated
        assert user.status is UserStatus.LOCKED
        assert user.locked_until == clock() + timedelta(days=30)
        assert user.consecutive_absences == 0
        assert user.total_absences == 3
        assert categories(member) == [HistoryCategory.LOCKOUT.value]

    def test_presence_between_absences_breaks_the_streak(self, reliability_tracker, member):
        reliability_tracker.record_absence(UserId(member.pk))
        reliability_tracker.record_absence(UserId(member.pk))
        reliability_tracker.record_presence(UserId(member.pk))
        reliability_tracker.record_absence(UserId(member.pk))

        user = reload(member)
        assert user.status is UserStatus.ACTIVE
        assert user.consecutive_absences == 1
        assert user.total_absences == 3

    def test_unknown_user(self, reliability_tracker):
        with pytest.raises(UserNotFoundError):
            reliability_tracker.record_absence(UserId(999))


@pytest.mark.django_db
class TestCheckAndAutoUnlock:
    """Tests for the login gate."""

    def test_active_user_passes_through(self, reliability_tracker, member):
        user = reload(member)
        assert reliability_tracker.check_and_auto_unlock(user) is user

    def test_active_lock_refuses_with_days_remaining(self, reliability_tracker, make_user, clock):
        user = make_user(status="locked", locked_until=clock() + timedelta(days=10))

        with pytest.raises(AccountLockedError) as exc_info:
            reliability_tracker.check_and_auto_unlock(reload(user))

        assert exc_info.value.days_remaining == 10
        assert "10 day(s)" in exc_info.value.message
        assert reload(user).is_locked

    def test_partial_day_is_rounded_up(self, reliability_tracker, make_user, clock):
        user = make_user(status="locked", locked_until=clock() + timedelta(hours=1))

        with pytest.raises(AccountLockedError) as exc_info:
            reliability_tracker.check_and_auto_unlock(reload(user))

        assert exc_info.value.days_remaining == 1

    def test_expired_lock_is_lifted(self, reliability_tracker, make_user, clock):
        """A lock that ran out yesterday is cleared and recorded."""
        user = make_user(
            status="locked",
            locked_until=clock() - timedelta(days=1),
            consecutive_absences=1,
            total_absences=3,
        )

        unlocked = reliability_tracker.check_and_auto_unlock(reload(user))

        assert unlocked.status is UserStatus.ACTIVE
        assert unlocked.locked_until is None
        assert unlocked.consecutive_absences == 0
        assert unlocked.total_absences == 3
        assert reload(user) == unlocked
        assert categories(user) == [HistoryCategory.UNLOCK.value]

    def test_lock_without_expiry_is_lifted(self, reliability_tracker, make_user):
        user = make_user(status="locked", locked_until=None)
        assert reliability_tracker.check_and_auto_unlock(reload(user)).status is UserStatus.ACTIVE


@pytest.mark.django_db
class TestUnlock:
    """Tests for ReliabilityTracker.unlock."""

    def test_unlock_active_user_writes_no_history(self, reliability_tracker, member):
        user = reliability_tracker.unlock(UserId(member.pk))
        assert user.status is UserStatus.ACTIVE
        assert categories(member) == []

    def test_unlock_after_lockout_allows_a_fresh_streak(self, reliability_tracker, member, clock):
        for _ in range(3):
            reliability_tracker.record_absence(UserId(member.pk))
        reliability_tracker.unlock(UserId(member.pk))
        reliability_tracker.record_absence(UserId(member.pk))

        user = reload(member)
        assert user.status is UserStatus.ACTIVE
        assert user.consecutive_absences == 1
        assert user.total_absences == 4
