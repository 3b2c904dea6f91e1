import logging

from django.conf import settings
from django.utils import timezone

from accounts.models import User
from course_files.exceptions import NotFound, Unauthorized
from course_files.models import CourseFileAssignment, TaskSubmission
from course_files.services import audit_log
from course_files.services.actor import is_department_head
from course_files.services.task_state import validate_decision

logger = logging.getLogger(__name__)


def batch_review_as_hod(assignment_id, actor, decision, remarks=None) -> int:
    """Apply one HOD decision to every task of an assignment awaiting the HOD.

    Only tasks that are completed, approved by the CC and not yet decided
    by the HOD are touched, all in a single UPDATE. Returns how many were
    updated; zero is a normal outcome.
    """
    decision = validate_decision(decision)
    if actor is None or actor.role != User.Role.HOD:
        raise Unauthorized('Only a HOD can batch review course files.')
    assignment = (
        CourseFileAssignment.objects
        .select_related('subject', 'section__semester__department')
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        raise NotFound('Course file assignment not found.')
    if not is_department_head(actor, assignment.section.semester.department):
        logger.warning('batch review rejected: %s', {'assignment_id': assignment.pk, 'actor_id': actor.id})
        raise Unauthorized('You are not the HOD for this department.')

    now = timezone.now()
    count = TaskSubmission.objects.filter(
        assignment=assignment,
        status=TaskSubmission.Status.COMPLETED,
        cc_status=TaskSubmission.ReviewStatus.YES,
        hod_status=TaskSubmission.ReviewStatus.PENDING,
    ).update(
        hod_status=decision,
        hod_remarks=remarks or settings.COURSE_FILE_BATCH_REMARK,
        hod_review_date=now,
        updated_at=now,
    )

    audit_log.record(
        audit_log.Action.HOD_BATCH_REVIEW,
        f'{actor.name} marked {count} task(s) as {decision} for {assignment.subject.name}',
        actor,
        assignment=assignment,
        metadata={'count': count, 'decision': decision},
        **audit_log.describe_assignment(assignment),
    )
    logger.info('%s', {'event': 'hod_batch_review', 'assignment_id': assignment.pk, 'count': count, 'actor_id': actor.id})
    return count
