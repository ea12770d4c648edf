from rest_framework import permissions
import logging

logger = logging.getLogger(__name__)


def _is_authenticated(user):
    return bool(user and getattr(user, "is_authenticated", False) and user.is_active)


class IsAdmin(permissions.BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view):
        user = request.user
        return _is_authenticated(user) and user.is_admin_role


class IsAdminOrKitchen(permissions.BasePermission):
    """Admins, plus kitchen staff whose account has been approved."""

    message = "Not authorized - admin or kitchen access required."

    def has_permission(self, request, view):
        user = request.user
        if not _is_authenticated(user):
            return False
        allowed = user.is_admin_role or user.is_kitchen_staff
        if not allowed:
            logger.warning(
                "Denied %s %s for user=%s role=%s",
                request.method,
                request.get_full_path(),
                user.pk,
                user.role,
            )
        return allowed
