import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import bookings.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("phone", models.CharField(blank=True, default="", max_length=30)),
                (
                    "role",
                    models.CharField(
                        choices=[("member", "Member"), ("admin", "Admin")],
                        default="member",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("locked", "Locked")],
                        default="active",
                        max_length=10,
                    ),
                ),
                ("locked_until", models.DateTimeField(blank=True, null=True)),
                ("consecutive_absences", models.PositiveIntegerField(default=0)),
                ("total_absences", models.PositiveIntegerField(default=0)),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "usuarios",
                "ordering": ["-date_joined"],
            },
            managers=[
                ("objects", bookings.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("event_date", models.DateField()),
                ("event_time", models.TimeField()),
                ("gate_opens_at", models.TimeField(blank=True, null=True)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("total_capacity", models.PositiveIntegerField()),
                ("available_capacity", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("closed", "Closed"), ("cancelled", "Cancelled")],
                        default="active",
                        max_length=10,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "eventos",
                "ordering": ["event_date", "event_time"],
                "indexes": [models.Index(fields=["status", "event_date"], name="eventos_status_date_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("available_capacity__gte", 0),
                            ("available_capacity__lte", models.F("total_capacity")),
                        ),
                        name="event_available_within_total",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence_number", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("present", "Present"),
                            ("absent", "Absent"),
                        ],
                        default="confirmed",
                        max_length=10,
                    ),
                ),
                (
                    "attendance",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("absent", "Absent")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("present_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservations",
                        to="bookings.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "agendamentos",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="agendamentos_user_status_idx"),
                    models.Index(fields=["event", "status"], name="agendamentos_event_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "event"), name="one_reservation_per_user_event"),
                    models.UniqueConstraint(fields=("event", "sequence_number"), name="unique_sequence_per_event"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("agendamento", "Booking"),
                            ("cancelamento", "Cancellation"),
                            ("presenca", "Presence"),
                            ("falta", "Absence"),
                            ("bloqueio", "Lockout"),
                            ("desbloqueio", "Unlock"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "historico",
                "ordering": ["-created_at", "-id"],
                "verbose_name_plural": "history entries",
            },
        ),
    ]
