from typing import List

from .models import Department, Section


def get_user_hod_department_ids(user) -> List[int]:
    """Return list of department IDs the user is HOD for.

    HOD authority is the `Department.head_user` link; a user may head more
    than one department. Returns an empty list for anonymous users.
    """
    user_id = getattr(user, 'id', None)
    if not user_id:
        return []
    return list(Department.objects.filter(head_user_id=user_id).values_list('id', flat=True).order_by('id'))


def get_user_coordinated_section_ids(user) -> List[int]:
    """Return ids of classes the user coordinates (Section.coordinator)."""
    user_id = getattr(user, 'id', None)
    if not user_id:
        return []
    return list(Section.objects.filter(coordinator_id=user_id).values_list('id', flat=True).order_by('id'))


def section_with_tree(section_id):
    """Fetch a Section together with its semester and department, or None."""
    return Section.objects.select_related('semester__department').filter(pk=section_id).first()
