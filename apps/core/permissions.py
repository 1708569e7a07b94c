"""
Shared permission classes.

Permission Classes:
    IsEnabledUser - Rejects suspended or archived accounts
    IsAdminRole   - Business owner, admin role or superuser only
"""

from rest_framework.permissions import BasePermission

ADMIN_ROLES = ('owner', 'admin')


def has_admin_role(user) -> bool:
    if user is None or not user.is_authenticated:
        return False
    if not getattr(user, 'is_enabled', True):
        return False
    return user.is_superuser or getattr(user, 'role', None) in ADMIN_ROLES


class IsEnabledUser(BasePermission):
    """Authenticated and not suspended or archived."""

    message = 'Your account is suspended or archived.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'is_enabled', True))


class IsAdminRole(BasePermission):
    """
    Restrict to the business owner and admins.

    Used by the audit panel, diagnostics and backup endpoints.
    """

    message = 'Only owners and admins can access this resource.'

    def has_permission(self, request, view):
        return has_admin_role(request.user)
