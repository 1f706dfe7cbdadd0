"""
Core App Permissions
"""

from rest_framework import permissions

from .models import UserRole


class IsAdminUser(permissions.BasePermission):
    """Permission for admin users only."""

    message = 'Admin access required'

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == UserRole.ADMIN
