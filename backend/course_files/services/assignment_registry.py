import logging
from datetime import timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import User
from academics.models import Subject
from academics.utils import section_with_tree
from course_files.exceptions import Conflict, NotFound, Unauthorized
from course_files.models import CourseFileAssignment, TaskSubmission, TaskTemplate
from course_files.services import audit_log
from course_files.services.actor import can_manage_section

logger = logging.getLogger(__name__)


def default_deadline(now=None):
    now = now or timezone.now()
    return now + timedelta(days=settings.COURSE_FILE_DEFAULT_DEADLINE_DAYS)


def _get_assignment(assignment_id) -> CourseFileAssignment:
    assignment = (
        CourseFileAssignment.objects
        .select_related('subject', 'faculty', 'section__semester__department')
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        raise NotFound('Course file assignment not found.')
    return assignment


def create_assignment(subject_id, faculty_id, section_id, actor,
                      deadlines: Optional[Dict[int, object]] = None) -> CourseFileAssignment:
    """Assign a faculty member to a subject in a class.

    Creates the assignment and one task per active template in a single
    transaction. `deadlines` maps template id to a deadline; templates not
    in the map get the default offset.
    """
    section = section_with_tree(section_id)
    if section is None:
        raise NotFound('Class not found.')
    subject = Subject.objects.filter(pk=subject_id).first()
    if subject is None:
        raise NotFound('Subject not found.')
    faculty = User.objects.filter(pk=faculty_id).first()
    if faculty is None:
        raise NotFound('Faculty not found.')

    if not can_manage_section(actor, section):
        logger.warning('assignment rejected: %s', {'section_id': section.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('You are not the Class Coordinator or HOD for this class.')

    if CourseFileAssignment.objects.filter(subject=subject, faculty=faculty, section=section).exists():
        raise Conflict('Faculty already assigned to this subject in this class.')

    deadlines = deadlines or {}
    fallback = default_deadline()
    try:
        with transaction.atomic():
            assignment = CourseFileAssignment.objects.create(
                subject=subject,
                faculty=faculty,
                section=section,
                created_by_id=actor.id,
            )
            templates = TaskTemplate.objects.filter(is_active=True).order_by('order', 'id')
            TaskSubmission.objects.bulk_create([
                TaskSubmission(
                    assignment=assignment,
                    template=template,
                    deadline=deadlines.get(template.pk) or fallback,
                )
                for template in templates
            ])
    except IntegrityError:
        # lost a race with a concurrent creation of the same triple
        raise Conflict('Faculty already assigned to this subject in this class.')

    audit_log.record(
        audit_log.Action.FACULTY_ASSIGNED,
        f'{actor.name} assigned {faculty.display_name} to {subject.name} in {section.name}',
        actor,
        assignment=assignment,
        metadata={'faculty_id': faculty.pk, 'task_count': assignment.tasks.count()},
        **audit_log.describe_assignment(assignment),
    )
    logger.info('%s', {
        'event': 'assignment_created',
        'assignment_id': assignment.pk,
        'section_id': section.pk,
        'actor_id': actor.id,
    })
    return assignment


@transaction.atomic
def delete_assignment(assignment_id, actor) -> None:
    """Delete an assignment together with all of its tasks.

    The log entry is written first; afterwards it keeps the names but loses
    the link to the assignment.
    """
    assignment = _get_assignment(assignment_id)
    if not can_manage_section(actor, assignment.section):
        logger.warning('assignment delete rejected: %s', {'assignment_id': assignment.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('You are not the Class Coordinator or HOD for this class.')

    audit_log.record(
        audit_log.Action.ASSIGNMENT_DELETED,
        f'{actor.name} removed {assignment.faculty.display_name} from {assignment.subject.name} in {assignment.section.name}',
        actor,
        assignment=assignment,
        metadata={'assignment_id': assignment.pk, 'faculty_name': assignment.faculty.display_name},
        **audit_log.describe_assignment(assignment),
    )
    removed, _ = TaskSubmission.objects.filter(assignment=assignment).delete()
    assignment.delete()
    logger.info('%s', {'event': 'assignment_deleted', 'assignment_id': assignment_id, 'tasks_removed': removed, 'actor_id': actor.id})


def list_section_assignments(section_id, actor) -> List[CourseFileAssignment]:
    """Assignments of a class annotated with `task_count` and `completed_count`.

    The class coordinator and the HOD see every assignment of the class;
    a faculty member only sees their own.
    """
    section = section_with_tree(section_id)
    if section is None:
        raise NotFound('Class not found.')
    qs = CourseFileAssignment.objects.filter(section=section)
    if not can_manage_section(actor, section):
        if actor.role == User.Role.STUDENT:
            raise Unauthorized('Students cannot view course file assignments.')
        qs = qs.filter(faculty_id=actor.id)
    return list(
        qs
        .select_related('subject', 'faculty')
        .annotate(
            task_count=Count('tasks'),
            completed_count=Count('tasks', filter=Q(tasks__status=TaskSubmission.Status.COMPLETED)),
        )
        .order_by('subject__name', 'id')
    )


def list_faculty_tasks(actor) -> List[TaskSubmission]:
    return list(
        TaskSubmission.objects
        .filter(assignment__faculty_id=actor.id)
        .select_related('template', 'assignment__subject', 'assignment__section')
        .order_by('deadline', 'id')
    )
