"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from bookings import models
from bookings.services import (
    build_account_service,
    build_event_service,
    build_reliability_tracker,
    build_report_service,
    build_reservation_service,
)

PASSWORD = "Str0ng!pass"


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 10, 15, 0, tzinfo=dt_timezone.utc))


@pytest.fixture
def make_user(db):
    counter = iter(range(1, 1000))

    def factory(name=None, email=None, password=PASSWORD, **extra):
        n = next(counter)
        return models.User.objects.create_user(
            email=email or f"user{n}@example.com",
            name=name or f"User {n}",
            password=password,
            **extra,
        )

    return factory


@pytest.fixture
def member(make_user):
    return make_user(name="Ana Souza", email="ana@example.com")


@pytest.fixture
def other_member(make_user):
    return make_user(name="Bruno Lima", email="bruno@example.com")


@pytest.fixture
def admin_user(db):
    return models.User.objects.create_superuser(
        email="admin@example.com", name="Admin", password=PASSWORD
    )


@pytest.fixture
def make_event(db, clock):
    """Create an event starting at an exact instant (default: three days from now)."""

    def factory(starts_at=None, capacity=10, title="Community lunch", **extra):
        local = timezone.localtime(starts_at or clock() + timedelta(days=3))
        return models.Event.objects.create(
            title=title,
            event_date=local.date(),
            event_time=local.time(),
            total_capacity=capacity,
            available_capacity=extra.pop("available_capacity", capacity),
            **extra,
        )

    return factory


@pytest.fixture
def event(make_event):
    return make_event()


@pytest.fixture
def reservation_service(clock):
    return build_reservation_service(clock)


@pytest.fixture
def event_service(clock):
    return build_event_service(clock)


@pytest.fixture
def account_service(clock):
    return build_account_service(clock)


@pytest.fixture
def reliability_tracker(clock):
    return build_reliability_tracker(clock)


@pytest.fixture
def report_service():
    return build_report_service()


@pytest.fixture
def seats_left(db):
    def lookup(event) -> int:
        return models.Event.objects.values_list("available_capacity", flat=True).get(pk=event.pk)

    return lookup
