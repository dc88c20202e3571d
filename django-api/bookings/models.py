"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Capacity counters on Event are only written through the capacity ledger.
"""

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from bookings.domain.enums import (
    AttendanceStatus,
    EventStatus,
    HistoryCategory,
    ReservationStatus,
    Role,
    UserStatus,
    choices,
)


class UserManager(BaseUserManager):
    def create_user(self, email, name, password=None, **extra_fields):
        if not email:
            raise ValueError("Users must have an email address")
        user = self.model(email=self.normalize_email(email).lower(), name=name, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None, **extra_fields):
        extra_fields["role"] = Role.ADMIN.value
        return self.create_user(email, name, password, **extra_fields)


class User(AbstractBaseUser):
    """Persistence model for users, including their reliability state."""

    name = models.CharField(max_length=150)
    email = models.EmailField(max_length=255, unique=True)
    phone = models.CharField(max_length=30, blank=True, default="")
    role = models.CharField(max_length=10, choices=choices(Role), default=Role.MEMBER.value)
    status = models.CharField(
        max_length=10, choices=choices(UserStatus), default=UserStatus.ACTIVE.value
    )
    locked_until = models.DateTimeField(blank=True, null=True)
    consecutive_absences = models.PositiveIntegerField(default=0)
    total_absences = models.PositiveIntegerField(default=0)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        db_table = "usuarios"
        ordering = ["-date_joined"]

    def __str__(self) -> str:
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    # Django admin site integration.
    @property
    def is_staff(self) -> bool:
        return self.is_admin

    def has_perm(self, perm, obj=None) -> bool:
        return self.is_admin

    def has_module_perms(self, app_label) -> bool:
        return self.is_admin


class Event(models.Model):
    """Persistence model for events."""

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    event_date = models.DateField()
    event_time = models.TimeField()
    gate_opens_at = models.TimeField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, default="")
    total_capacity = models.PositiveIntegerField()
    available_capacity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=10, choices=choices(EventStatus), default=EventStatus.ACTIVE.value
    )
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "eventos"
        ordering = ["event_date", "event_time"]
        indexes = [
            models.Index(fields=["status", "event_date"], name="eventos_status_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(available_capacity__gte=0)
                & Q(available_capacity__lte=F("total_capacity")),
                name="event_available_within_total",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.event_date}"


class Reservation(models.Model):
    """Persistence model for reservations. One row per (user, event)."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reservations")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="reservations")
    sequence_number = models.PositiveIntegerField()
    status = models.CharField(
        max_length=10,
        choices=choices(ReservationStatus),
        default=ReservationStatus.CONFIRMED.value,
    )
    attendance = models.CharField(
        max_length=10,
        choices=choices(AttendanceStatus),
        default=AttendanceStatus.PENDING.value,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)
    present_at = models.DateTimeField(blank=True, null=True)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "agendamentos"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "event"], name="one_reservation_per_user_event"),
            models.UniqueConstraint(
                fields=["event", "sequence_number"], name="unique_sequence_per_event"
            ),
        ]
        indexes = [
            models.Index(fields=["user", "status"], name="agendamentos_user_status_idx"),
            models.Index(fields=["event", "status"], name="agendamentos_event_status_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.sequence_number} {self.user} @ {self.event}"


class HistoryEntry(models.Model):
    """Append-only audit trail."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="history")
    category = models.CharField(max_length=20, choices=choices(HistoryCategory))
    description = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "historico"
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "history entries"

    def __str__(self) -> str:
        return f"{self.category}: {self.description}"
