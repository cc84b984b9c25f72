from rest_framework import permissions

from .context import ROLE_ADMIN, ROLE_STAFF


class IsCafeStaff(permissions.BasePermission):
    """
    Permission to only allow cafe admins and staff (staff flag or membership
    in the admin/staff group)
    """
    message = 'Only cafe staff can access this resource.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_staff or user.is_superuser:
            return True
        return user.groups.filter(name__in=[ROLE_ADMIN, ROLE_STAFF]).exists()

