from bookings.handlers.views import (
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

__all__ = [
    "AdminEventDetailView",
    "AdminEventListView",
    "AdminEventStatisticsView",
    "AdminUserAbsenceResetView",
    "AdminUserDetailView",
    "AdminUserListView",
    "AdminUserUnlockView",
    "AttendanceSheetView",
    "AttendanceView",
    "DashboardStatsView",
    "EventDetailView",
    "EventListView",
    "HistoryView",
    "LoginView",
    "LogoutView",
    "MeView",
    "PasswordChangeView",
    "ProfileView",
    "RegisterView",
    "ReservationCancelView",
    "ReservationDetailView",
    "ReservationListView",
    "ReservationsReportView",
    "UsersReportView",
]
