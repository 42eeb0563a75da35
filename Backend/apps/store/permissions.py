from rest_framework import permissions

from apps.accounts.models import User


class IsAdminRole(permissions.BasePermission):
    """
    Permite acesso apenas a usuários com role='admin'.
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role == User.Role.ADMIN)
