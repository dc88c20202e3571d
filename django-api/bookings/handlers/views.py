"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.contrib.auth import get_user_model, login, logout
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.cache import AVAILABLE_EVENTS_KEY, CACHE_TIMEOUT, event_key
from bookings.domain import EventId
from bookings.domain.errors import DomainError
from bookings.handlers.permissions import IsAdministrator
from bookings.handlers.responses import error_response, result_response, validation_error_response
from bookings.handlers.serializers import (
    AttendanceSheetRowSerializer,
    CancellationSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventStatisticsSerializer,
    EventUpdateSerializer,
    HistoryEntrySerializer,
    LoginSerializer,
    PasswordChangeSerializer,
    ProfileSerializer,
    RegisterSerializer,
    ReservationCreateSerializer,
    ReservationReportRowSerializer,
    ReservationSerializer,
    UserReportRowSerializer,
    UserReservationSerializer,
    UserSerializer,
    UserStatisticsSerializer,
)
from bookings.services import (
    build_account_service,
    build_event_service,
    build_report_service,
    build_reservation_service,
)
from bookings.services.boundary import parse_id

# Accounts


class RegisterView(APIView):
    """Handler for POST /api/auth/register"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        data = serializer.validated_data
        result = build_account_service().register(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            phone=data["phone"],
        )
        return result_response(result, UserSerializer, success_status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Handler for POST /api/auth/login"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_account_service().authenticate(
            serializer.validated_data["email"], serializer.validated_data["password"]
        )
        if not result.ok:
            return error_response(result.error)
        login(request, get_user_model().objects.get(pk=result.value.id.value))
        return Response({"success": True, "user": UserSerializer(result.value).data})


class LogoutView(APIView):
    """Handler for POST /api/auth/logout"""

    def post(self, request: Request) -> Response:
        logout(request)
        return Response({"success": True})


class MeView(APIView):
    """Handler for GET /api/auth/me"""

    def get(self, request: Request) -> Response:
        return result_response(build_account_service().get_profile(request.user.pk), UserSerializer)


class ProfileView(APIView):
    """Handler for PATCH /api/profile"""

    def patch(self, request: Request) -> Response:
        serializer = ProfileSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_account_service().update_profile(request.user.pk, serializer.to_patch())
        return result_response(result, UserSerializer)


class PasswordChangeView(APIView):
    """Handler for POST /api/profile/password"""

    def post(self, request: Request) -> Response:
        serializer = PasswordChangeSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_account_service().change_password(
            request.user.pk,
            serializer.validated_data["current_password"],
            serializer.validated_data["new_password"],
        )
        return result_response(result)


# Events


class EventListView(APIView):
    """Handler for GET /api/events

    Lists bookable events, each flagged with whether the caller holds a seat.
    """

    def get(self, request: Request) -> Response:
        service = build_event_service()
        events = cache.get(AVAILABLE_EVENTS_KEY)
        if events is None:
            result = service.list_available()
            if not result.ok:
                return error_response(result.error)
            events = EventSerializer(result.value, many=True).data
            cache.set(AVAILABLE_EVENTS_KEY, events, CACHE_TIMEOUT)

        booked = service.booked_event_ids(request.user.pk)
        if not booked.ok:
            return error_response(booked.error)
        booked_ids = {event_id.value for event_id in booked.value}
        return Response(
            {"events": [{**event, "already_booked": event["id"] in booked_ids} for event in events]}
        )


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            key = event_key(parse_id(EventId, event_id, "event"))
        except DomainError as exc:
            return error_response(exc)
        payload = cache.get(key)
        if payload is None:
            result = build_event_service().get_event(event_id)
            if not result.ok:
                return error_response(result.error)
            payload = EventSerializer(result.value).data
            cache.set(key, payload, CACHE_TIMEOUT)
        return Response(payload)


# Reservations


class ReservationListView(APIView):
    """Handler for GET/POST /api/reservations"""

    def get(self, request: Request) -> Response:
        service = build_reservation_service()
        reservations = service.list_by_user(request.user.pk)
        if not reservations.ok:
            return error_response(reservations.error)
        statistics = service.user_statistics(request.user.pk)
        if not statistics.ok:
            return error_response(statistics.error)
        return Response(
            {
                "reservations": UserReservationSerializer(reservations.value, many=True).data,
                "statistics": UserStatisticsSerializer(statistics.value).data,
            }
        )

    def post(self, request: Request) -> Response:
        serializer = ReservationCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_reservation_service().create(
            request.user.pk, serializer.validated_data["event_id"]
        )
        return result_response(result, ReservationSerializer, success_status=status.HTTP_201_CREATED)


class ReservationDetailView(APIView):
    """Handler for GET /api/reservations/{reservation_id}"""

    def get(self, request: Request, reservation_id: str) -> Response:
        result = build_reservation_service().get_by_id(reservation_id, request.user.pk)
        return result_response(result, UserReservationSerializer)


class ReservationCancelView(APIView):
    """Handler for POST /api/reservations/{reservation_id}/cancel"""

    def post(self, request: Request, reservation_id: str) -> Response:
        serializer = CancellationSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_reservation_service().cancel(
            reservation_id,
            request.user.pk,
            serializer.validated_data["justification"],
        )
        return result_response(result, ReservationSerializer)


class DashboardStatsView(APIView):
    """Handler for GET /api/dashboard/stats"""

    def get(self, request: Request) -> Response:
        user = build_account_service().get_profile(request.user.pk)
        if not user.ok:
            return error_response(user.error)
        statistics = build_reservation_service().user_statistics(request.user.pk)
        if not statistics.ok:
            return error_response(statistics.error)
        return Response(
            {
                "user": UserSerializer(user.value).data,
                "reservations": UserStatisticsSerializer(statistics.value).data,
                "can_book": not user.value.is_locked,
            }
        )


class HistoryView(APIView):
    """Handler for GET /api/history"""

    def get(self, request: Request) -> Response:
        result = build_account_service().history(request.user.pk)
        return result_response(result, HistoryEntrySerializer, many=True)


# Administration


class AdminEventListView(APIView):
    """Handler for GET/POST /api/admin/events"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request) -> Response:
        return result_response(build_event_service().list_events(), EventSerializer, many=True)

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_event_service().create_event(serializer.to_draft())
        return result_response(result, EventSerializer, success_status=status.HTTP_201_CREATED)


class AdminEventDetailView(APIView):
    """Handler for PATCH/DELETE /api/admin/events/{event_id}"""

    permission_classes = [IsAdministrator]

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_event_service().update_event(event_id, serializer.to_patch())
        return result_response(result, EventSerializer)

    def delete(self, request: Request, event_id: str) -> Response:
        return result_response(build_event_service().delete_event(event_id))


class AdminEventStatisticsView(APIView):
    """Handler for GET /api/admin/events/{event_id}/statistics"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request, event_id: str) -> Response:
        result = build_report_service().event_statistics(event_id)
        return result_response(result, EventStatisticsSerializer)


class AttendanceView(APIView):
    """Handler for POST /api/admin/reservations/{reservation_id}/{presence|absence}"""

    permission_classes = [IsAdministrator]
    outcome = "presence"

    def post(self, request: Request, reservation_id: str) -> Response:
        service = build_reservation_service()
        if self.outcome == "presence":
            result = service.record_presence(reservation_id)
        else:
            result = service.record_absence(reservation_id)
        return result_response(result, ReservationSerializer)


class AdminUserListView(APIView):
    """Handler for GET /api/admin/users"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request) -> Response:
        return result_response(build_account_service().list_users(), UserSerializer, many=True)


class AdminUserDetailView(APIView):
    """Handler for PATCH /api/admin/users/{user_id}"""

    permission_classes = [IsAdministrator]

    def patch(self, request: Request, user_id: str) -> Response:
        serializer = ProfileSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = build_account_service().update_profile(user_id, serializer.to_patch())
        return result_response(result, UserSerializer)


class AdminUserUnlockView(APIView):
    """Handler for POST /api/admin/users/{user_id}/unlock"""

    permission_classes = [IsAdministrator]

    def post(self, request: Request, user_id: str) -> Response:
        return result_response(build_account_service().unlock_user(user_id), UserSerializer)


class AdminUserAbsenceResetView(APIView):
    """Handler for POST /api/admin/users/{user_id}/absences/reset"""

    permission_classes = [IsAdministrator]

    def post(self, request: Request, user_id: str) -> Response:
        return result_response(build_account_service().clear_absence_streak(user_id), UserSerializer)


class ReservationsReportView(APIView):
    """Handler for GET /api/admin/reports/reservations[?event_id=]"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request) -> Response:
        result = build_report_service().reservations_report(request.query_params.get("event_id"))
        if not result.ok:
            return error_response(result.error)
        return Response({"reservations": ReservationReportRowSerializer(result.value, many=True).data})


class UsersReportView(APIView):
    """Handler for GET /api/admin/reports/users"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request) -> Response:
        result = build_report_service().users_report()
        if not result.ok:
            return error_response(result.error)
        return Response({"users": UserReportRowSerializer(result.value, many=True).data})


class AttendanceSheetView(APIView):
    """Handler for GET /api/admin/reports/attendance[?event_id=]"""

    permission_classes = [IsAdministrator]

    def get(self, request: Request) -> Response:
        result = build_report_service().attendance_sheet(request.query_params.get("event_id"))
        if not result.ok:
            return error_response(result.error)
        return Response({"attendance": AttendanceSheetRowSerializer(result.value, many=True).data})
