"""Service wiring.

Services are built per use from the Django stores; nothing here is a
process-wide singleton. Business policies come from settings.
"""

from collections.abc import Callable
from datetime import datetime

from django.conf import settings
from django.utils import timezone

from bookings.domain import CancellationPolicy, ReliabilityPolicy
from bookings.services.account_service import AccountService
from bookings.services.audit_trail import AuditTrail
from bookings.services.capacity_ledger import CapacityLedger
from bookings.services.event_service import EventService
from bookings.services.reliability_tracker import ReliabilityTracker
from bookings.services.report_service import ReportService
from bookings.services.reservation_service import ReservationService
from bookings.stores.django_reports import DjangoReportStore
from bookings.stores.django_store import (
    DjangoEventStore,
    DjangoHistoryStore,
    DjangoReservationStore,
    DjangoTransactionScope,
    DjangoUserStore,
)

Clock = Callable[[], datetime]


def cancellation_policy() -> CancellationPolicy:
    return CancellationPolicy(notice_hours=settings.BOOKING_CANCELLATION_NOTICE_HOURS)


def reliability_policy() -> ReliabilityPolicy:
    return ReliabilityPolicy(
        absence_limit=settings.RELIABILITY_ABSENCE_LIMIT,
        lock_days=settings.RELIABILITY_LOCK_DAYS,
    )


def build_reliability_tracker(clock: Clock = timezone.now) -> ReliabilityTracker:
    return ReliabilityTracker(
        users=DjangoUserStore(),
        transactions=DjangoTransactionScope(),
        audit=AuditTrail(DjangoHistoryStore()),
        policy=reliability_policy(),
        clock=clock,
    )


def build_reservation_service(clock: Clock = timezone.now) -> ReservationService:
    events = DjangoEventStore()
    return ReservationService(
        reservations=DjangoReservationStore(),
        events=events,
        users=DjangoUserStore(),
        transactions=DjangoTransactionScope(),
        ledger=CapacityLedger(events),
        tracker=build_reliability_tracker(clock),
        audit=AuditTrail(DjangoHistoryStore()),
        policy=cancellation_policy(),
        clock=clock,
    )


def build_event_service(clock: Clock = timezone.now) -> EventService:
    return EventService(events=DjangoEventStore(), reservations=DjangoReservationStore(), clock=clock)


def build_account_service(clock: Clock = timezone.now) -> AccountService:
    return AccountService(
        users=DjangoUserStore(),
        transactions=DjangoTransactionScope(),
        tracker=build_reliability_tracker(clock),
        audit=AuditTrail(DjangoHistoryStore()),
        clock=clock,
    )


def build_report_service() -> ReportService:
    return ReportService(
        reports=DjangoReportStore(),
        events=DjangoEventStore(),
        reservations=DjangoReservationStore(),
    )


__all__ = [
    "AccountService",
    "AuditTrail",
    "CapacityLedger",
    "EventService",
    "ReliabilityTracker",
    "ReportService",
    "ReservationService",
    "build_account_service",
    "build_event_service",
    "build_reliability_tracker",
    "build_report_service",
    "build_reservation_service",
]
