from rest_framework import permissions

from apps.accounts.models import User


class IsPatient(permissions.BasePermission):
    """
    Permite acesso apenas a pacientes (role='patient' ou legado 'client').
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role in User.PATIENT_ROLES)


class IsDocumentReviewer(permissions.BasePermission):
    """
    Permite acesso a quem revisa receitas e autorizações ANVISA (admin ou médico).
    """
    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and request.user.role in (User.Role.ADMIN, User.Role.DOCTOR)
        )
