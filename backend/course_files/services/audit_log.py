import logging
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q

from course_files.exceptions import NotFound, Unauthorized
from course_files.models import CourseFileAssignment, CourseFileLog
from course_files.services.actor import is_department_head

logger = logging.getLogger(__name__)

Action = CourseFileLog.Action

SYSTEM_ACTOR_NAME = 'System'


def record(action: str, message: str, actor, *, assignment=None, class_name: Optional[str] = None,
           subject_name: Optional[str] = None, task_title: Optional[str] = None,
           metadata: Optional[dict] = None) -> Optional[CourseFileLog]:
    """Append one activity entry. Best-effort.

    The insert runs in its own savepoint so a failure here never rolls back
    the caller's transition. Returns the entry, or None if it could not be
    written.
    """
    actor_id = getattr(actor, 'id', None)
    actor_name = getattr(actor, 'name', None) or SYSTEM_ACTOR_NAME
    try:
        with transaction.atomic():
            entry = CourseFileLog.objects.create(
                action=action,
                message=message,
                actor_id=actor_id,
                actor_name=actor_name,
                assignment=assignment,
                class_name=class_name,
                subject_name=subject_name,
                task_title=task_title,
                metadata=metadata,
            )
    except Exception:
        logger.exception('course file log write failed: %s', {'action': action, 'actor_id': actor_id})
        return None
    return entry


def describe_assignment(assignment) -> dict:
    """Snapshot the display names of an assignment for a log entry."""
    return {
        'class_name': assignment.section.name,
        'subject_name': assignment.subject.name,
    }


def recent_entries(actor, limit: Optional[int] = None) -> List[CourseFileLog]:
    """Newest entries the actor may see.

    That is everything recorded against assignments in the departments the
    actor heads, plus the actor's own entries that have no assignment
    (template changes, removed assignments).
    """
    if limit is None:
        limit = settings.COURSE_FILE_LOG_PAGE_SIZE
    visible = Q(assignment__section__semester__department_id__in=actor.departments_headed)
    visible |= Q(assignment__isnull=True, actor_id=actor.id)
    return list(CourseFileLog.objects.filter(visible).select_related('actor')[:limit])


def assignment_entries(assignment_id, actor) -> List[CourseFileLog]:
    assignment = (
        CourseFileAssignment.objects
        .select_related('section__semester__department')
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        raise NotFound('Course file assignment not found.')
    if not is_department_head(actor, assignment.section.semester.department):
        logger.warning('assignment log read rejected: %s', {'assignment_id': assignment.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('You are not the HOD for this department.')
    return list(CourseFileLog.objects.filter(assignment=assignment).select_related('actor'))
