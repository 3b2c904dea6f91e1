from rest_framework import permissions

from academics.models import Department


class IsHODOfDepartment(permissions.BasePermission):
    """Allow access only to users who head at least one department.

    Object-level authority (is this the HOD of *that* department) is decided
    by the service layer, which walks the academic tree for each record.
    """

    message = 'Only a Head of Department may perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return Department.objects.filter(head_user=user).exists()


class IsHODOrReadOnly(IsHODOfDepartment):
    """Read for any authenticated user; writes require an HOD."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)
