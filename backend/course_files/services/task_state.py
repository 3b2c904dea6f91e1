"""Lifecycle of a single course-file task.

A task is the triple (status, cc_status, hod_status), starting at
(PENDING, PENDING, PENDING). The faculty member completes or reverts it,
the class coordinator reviews it, then the HOD reviews it.

Every transition is one conditional UPDATE that only matches while the
row still holds the state the guards were checked against. If another
request changed the task in between, nothing is written and the caller
gets InvalidState.
"""
import logging

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from accounts.models import User
from course_files.exceptions import InvalidState, NotFound, Unauthorized
from course_files.models import TaskSubmission
from course_files.services import audit_log
from course_files.services.actor import can_manage_section, is_department_head, is_section_coordinator

logger = logging.getLogger(__name__)

Role = User.Role
Status = TaskSubmission.Status
ReviewStatus = TaskSubmission.ReviewStatus

AUTO_APPROVAL_REMARK = 'Auto-approved: completed by the reviewer on their own subject'

DECISIONS = (ReviewStatus.YES, ReviewStatus.NO)

_CLEARED_CC = {'cc_status': ReviewStatus.PENDING, 'cc_remarks': None, 'cc_review_date': None}
_CLEARED_HOD = {'hod_status': ReviewStatus.PENDING, 'hod_remarks': None, 'hod_review_date': None}


def _load_task(task_id) -> TaskSubmission:
    task = (
        TaskSubmission.objects
        .select_related('template', 'assignment__subject', 'assignment__faculty', 'assignment__section__semester__department')
        .filter(pk=task_id)
        .first()
    )
    if task is None:
        raise NotFound('Task not found.')
    return task


def validate_decision(decision) -> str:
    if decision not in DECISIONS:
        raise ValueError(f'Review decision must be one of {", ".join(DECISIONS)}, got {decision!r}')
    return str(decision)


def _apply(task: TaskSubmission, event: str, actor, **changes) -> TaskSubmission:
    """Write `changes` only if the row still has the state `task` was read with."""
    now = timezone.now()
    observed = Q(status=task.status, cc_status=task.cc_status, hod_status=task.hod_status)
    updated = TaskSubmission.objects.filter(pk=task.pk).filter(observed).update(updated_at=now, **changes)
    if updated == 0:
        logger.warning('stale task transition: %s', {
            'event': event,
            'task_id': task.pk,
            'expected': task.state,
            'actor_id': actor.id,
        })
        raise InvalidState('Task was changed by someone else. Reload and try again.')

    for field, value in changes.items():
        setattr(task, field, value)
    task.updated_at = now
    logger.info('%s', {
        'event': event,
        'task_id': task.pk,
        'assignment_id': task.assignment_id,
        'actor_id': actor.id,
        'state': task.state,
    })
    return task


def _audit(action, message, actor, task: TaskSubmission, **metadata):
    audit_log.record(
        action,
        message,
        actor,
        assignment=task.assignment,
        task_title=task.template.title,
        metadata={'task_id': task.pk, **metadata},
        **audit_log.describe_assignment(task.assignment),
    )


def _require_assignee(task: TaskSubmission, actor):
    if actor is None or task.assignment.faculty_id != actor.id:
        logger.warning('task action by non-assignee: %s', {'task_id': task.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('Access denied: this task is not assigned to you.')


def complete(task_id, actor) -> TaskSubmission:
    """Mark a task as done by its faculty member.

    A HOD or CC completing a task on their own subject approves their own
    review stage at the same time. A plain faculty (re)submission clears
    any earlier review decisions.
    """
    task = _load_task(task_id)
    _require_assignee(task, actor)
    now = timezone.now()
    changes = {'status': Status.COMPLETED, 'completed_at': now}

    if actor.role == Role.HOD:
        changes.update(
            cc_status=ReviewStatus.YES, cc_remarks=AUTO_APPROVAL_REMARK, cc_review_date=now,
            hod_status=ReviewStatus.YES, hod_remarks=AUTO_APPROVAL_REMARK, hod_review_date=now,
        )
    elif actor.role == Role.CC:
        changes.update(cc_status=ReviewStatus.YES, cc_remarks=AUTO_APPROVAL_REMARK, cc_review_date=now, **_CLEARED_HOD)
    elif actor.role == Role.FACULTY:
        changes.update(**_CLEARED_CC, **_CLEARED_HOD)
    else:
        raise Unauthorized('Students cannot complete course file tasks.')

    _apply(task, 'task_completed', actor, **changes)
    _audit(
        audit_log.Action.TASK_COMPLETED,
        f'{actor.name} completed "{task.template.title}"',
        actor,
        task,
        self_approved=actor.role in (Role.HOD, Role.CC),
    )
    return task


def revert(task_id, actor) -> TaskSubmission:
    """Undo a completion and clear both reviews.

    Once the HOD has decided, a plain faculty member can no longer revert.
    Coordinators and HODs reverting their own task may do so while
    COURSE_FILE_SELF_APPROVER_REVERT_BYPASS is on.
    """
    task = _load_task(task_id)
    _require_assignee(task, actor)
    if actor.role not in (Role.FACULTY, Role.CC, Role.HOD):
        raise Unauthorized('Students cannot revert course file tasks.')
    if task.status != Status.COMPLETED:
        raise InvalidState('Task is not completed.')
    if task.hod_status != ReviewStatus.PENDING:
        bypass = actor.role in (Role.CC, Role.HOD) and settings.COURSE_FILE_SELF_APPROVER_REVERT_BYPASS
        if not bypass:
            logger.warning('revert blocked after hod review: %s', {'task_id': task.pk, 'actor_id': actor.id})
            raise InvalidState('Task already reviewed by HOD and cannot be reverted.')

    _apply(task, 'task_reverted', actor, status=Status.PENDING, completed_at=None, **_CLEARED_CC, **_CLEARED_HOD)
    _audit(audit_log.Action.TASK_REVERTED, f'{actor.name} reverted "{task.template.title}"', actor, task)
    return task


def review_as_cc(task_id, actor, decision, remarks=None) -> TaskSubmission:
    decision = validate_decision(decision)
    task = _load_task(task_id)
    if task.status != Status.COMPLETED:
        raise InvalidState('Task not completed by faculty yet.')
    if not is_section_coordinator(actor, task.assignment.section):
        logger.warning('cc review rejected: %s', {'task_id': task.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('You are not the CC for this class.')

    _apply(task, 'task_cc_reviewed', actor, cc_status=decision, cc_remarks=remarks, cc_review_date=timezone.now())
    _audit(
        audit_log.Action.CC_REVIEWED,
        f'{actor.name} marked "{task.template.title}" as {decision}',
        actor,
        task,
        decision=decision,
    )
    return task


def review_as_hod(task_id, actor, decision, remarks=None) -> TaskSubmission:
    decision = validate_decision(decision)
    task = _load_task(task_id)
    if task.status != Status.COMPLETED:
        raise InvalidState('Task not completed by faculty yet.')
    if task.cc_status == ReviewStatus.PENDING:
        raise InvalidState('CC must review this task first.')
    if not is_department_head(actor, task.assignment.section.semester.department):
        logger.warning('hod review rejected: %s', {'task_id': task.pk, 'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('You are not the HOD for this department.')

    _apply(task, 'task_hod_reviewed', actor, hod_status=decision, hod_remarks=remarks, hod_review_date=timezone.now())
    _audit(
        audit_log.Action.HOD_REVIEWED,
        f'{actor.name} marked "{task.template.title}" as {decision}',
        actor,
        task,
        decision=decision,
    )
    return task


def review(task_id, actor, decision, remarks=None) -> TaskSubmission:
    """Review with whichever authority the actor's role carries."""
    if actor.role == Role.CC:
        return review_as_cc(task_id, actor, decision, remarks)
    if actor.role == Role.HOD:
        return review_as_hod(task_id, actor, decision, remarks)
    if actor.role in (Role.FACULTY, Role.STUDENT):
        raise Unauthorized('Unauthorized role for review.')
    raise Unauthorized(f'Unknown role {actor.role!r}.')


def update_deadline(task_id, actor, deadline) -> TaskSubmission:
    task = _load_task(task_id)
    if not can_manage_section(actor, task.assignment.section):
        raise Unauthorized('You are not the Class Coordinator or HOD for this class.')

    previous = task.deadline
    updated = TaskSubmission.objects.filter(pk=task.pk).update(deadline=deadline, updated_at=timezone.now())
    if updated == 0:
        raise NotFound('Task not found.')
    task.deadline = deadline
    _audit(
        audit_log.Action.DEADLINE_UPDATED,
        f'{actor.name} moved the deadline of "{task.template.title}"',
        actor,
        task,
        previous=previous.isoformat(),
        deadline=deadline.isoformat(),
    )
    logger.info('%s', {'event': 'task_deadline_updated', 'task_id': task.pk, 'actor_id': actor.id})
    return task
