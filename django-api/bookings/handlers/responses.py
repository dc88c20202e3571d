"""Mapping from service Results to HTTP responses.

Only the domain error's code and user-safe message ever reach the client.
"""

from rest_framework import status
from rest_framework.response import Response

from bookings.domain.errors import DomainError, ErrorCode
from bookings.domain.results import Result

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.ACCOUNT_LOCKED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.DUPLICATE_ACTIVE: status.HTTP_409_CONFLICT,
    ErrorCode.NO_CAPACITY: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": error.message, "code": error.code.value},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def validation_error_response(errors) -> Response:
    return Response(
        {"error": "Invalid request.", "code": "INVALID_INPUT", "fields": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def result_response(
    result: Result,
    serializer_class=None,
    *,
    many: bool = False,
    success_status: int = status.HTTP_200_OK,
) -> Response:
    """Serialize a successful result, or map its error to a status code."""
    if not result.ok:
        return error_response(result.error)
    if serializer_class is None:
        return Response({"success": True}, status=success_status)
    return Response(serializer_class(result.value, many=many).data, status=success_status)
