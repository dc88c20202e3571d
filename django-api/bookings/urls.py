from django.urls import path

from bookings.handlers import (
    AdminEventDetailView,
    AdminEventListView,
    AdminEventStatisticsView,
    AdminUserAbsenceResetView,
    AdminUserDetailView,
    AdminUserListView,
    AdminUserUnlockView,
    AttendanceSheetView,
    AttendanceView,
    DashboardStatsView,
    EventDetailView,
    EventListView,
    HistoryView,
    LoginView,
    LogoutView,
    MeView,
    PasswordChangeView,
    ProfileView,
    RegisterView,
    ReservationCancelView,
    ReservationDetailView,
    ReservationListView,
    ReservationsReportView,
    UsersReportView,
)

urlpatterns = [
    path("auth/register", RegisterView.as_view(), name="register"),
    path("auth/login", LoginView.as_view(), name="login"),
    path("auth/logout", LogoutView.as_view(), name="logout"),
    path("auth/me", MeView.as_view(), name="me"),
    path("profile", ProfileView.as_view(), name="profile"),
    path("profile/password", PasswordChangeView.as_view(), name="password-change"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("reservations", ReservationListView.as_view(), name="reservation-list"),
    path(
        "reservations/<str:reservation_id>",
        ReservationDetailView.as_view(),
        name="reservation-detail",
    ),
    path(
        "reservations/<str:reservation_id>/cancel",
        ReservationCancelView.as_view(),
        name="reservation-cancel",
    ),
    path("dashboard/stats", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("history", HistoryView.as_view(), name="history"),
    path("admin/events", AdminEventListView.as_view(), name="admin-event-list"),
    path(
        "admin/events/<str:event_id>",
        AdminEventDetailView.as_view(),
        name="admin-event-detail",
    ),
    path(
        "admin/events/<str:event_id>/statistics",
        AdminEventStatisticsView.as_view(),
        name="admin-event-statistics",
    ),
    path(
        "admin/reservations/<str:reservation_id>/presence",
        AttendanceView.as_view(outcome="presence"),
        name="admin-record-presence",
    ),
    path(
        "admin/reservations/<str:reservation_id>/absence",
        AttendanceView.as_view(outcome="absence"),
        name="admin-record-absence",
    ),
    path("admin/users", AdminUserListView.as_view(), name="admin-user-list"),
    path("admin/users/<str:user_id>", AdminUserDetailView.as_view(), name="admin-user-detail"),
    path(
        "admin/users/<str:user_id>/unlock",
        AdminUserUnlockView.as_view(),
        name="admin-user-unlock",
    ),
    path(
        "admin/users/<str:user_id>/absences/reset",
        AdminUserAbsenceResetView.as_view(),
        name="admin-user-absence-reset",
    ),
    path(
        "admin/reports/reservations",
        ReservationsReportView.as_view(),
        name="report-reservations",
    ),
    path("admin/reports/users", UsersReportView.as_view(), name="report-users"),
    path(
        "admin/reports/attendance",
        AttendanceSheetView.as_view(),
        name="report-attendance",
    ),
]
