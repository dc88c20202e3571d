from rest_framework.permissions import BasePermission


class IsAdministrator(BasePermission):
    """Allows access to users whose role is admin."""

    message = "Access denied."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))
