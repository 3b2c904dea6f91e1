from dataclasses import dataclass, field
from typing import FrozenSet

from academics.utils import get_user_coordinated_section_ids, get_user_hod_department_ids


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, resolved once per request.

    Every service call takes an explicit Actor instead of reading the
    request. `sections_coordinated` and `departments_headed` are only used
    for scoping lists; transition guards check the org tree directly.
    """
    id: int
    name: str
    role: str
    sections_coordinated: FrozenSet[int] = field(default_factory=frozenset)
    departments_headed: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def for_user(cls, user) -> 'Actor':
        return cls(
            id=user.pk,
            name=user.display_name,
            role=user.role,
            sections_coordinated=frozenset(get_user_coordinated_section_ids(user)),
            departments_headed=frozenset(get_user_hod_department_ids(user)),
        )


def is_section_coordinator(actor, section) -> bool:
    return actor is not None and section.coordinator_id is not None and section.coordinator_id == actor.id


def is_department_head(actor, department) -> bool:
    return actor is not None and department.head_user_id is not None and department.head_user_id == actor.id


def can_manage_section(actor, section) -> bool:
    """Class coordinator of `section` or head of its department.

    `section` must have `semester__department` loaded.
    """
    return is_section_coordinator(actor, section) or is_department_head(actor, section.semester.department)
