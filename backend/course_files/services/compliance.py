"""Read-only progress and compliance roll-ups."""
from typing import Dict, List

from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import User
from academics.models import Department, Semester, Subject
from course_files.exceptions import NotFound, Unauthorized
from course_files.models import CourseFileAssignment, TaskSubmission
from course_files.services.actor import can_manage_section, is_department_head


Status = TaskSubmission.Status
ReviewStatus = TaskSubmission.ReviewStatus

_COUNTS = {
    'total': Count('id'),
    'completed': Count('id', filter=Q(status=Status.COMPLETED)),
    'cc_reviewed': Count('id', filter=~Q(cc_status=ReviewStatus.PENDING)),
    'hod_reviewed': Count('id', filter=~Q(hod_status=ReviewStatus.PENDING)),
}


def _percent(count: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when there is nothing to count."""
    if not total:
        return 0
    return (count * 200 + total) // (2 * total)


def _headed_departments(actor) -> List[Department]:
    departments = list(Department.objects.filter(head_user_id=getattr(actor, 'id', None)).order_by('code'))
    if not departments:
        raise NotFound('No departments found for this HOD.')
    return departments


def assignment_progress(assignment_id, actor) -> Dict[str, int]:
    """Completed over total tasks, for the assignee or whoever manages the class."""
    assignment = (
        CourseFileAssignment.objects
        .select_related('section__semester__department')
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        raise NotFound('Course file assignment not found.')
    if assignment.faculty_id != actor.id and not can_manage_section(actor, assignment.section):
        raise Unauthorized('Not authorized to view this assignment.')
    counts = TaskSubmission.objects.filter(assignment_id=assignment_id).aggregate(
        total=_COUNTS['total'], completed=_COUNTS['completed'],
    )
    return {'completed': counts['completed'], 'total': counts['total']}


def _pair(count: int, total: int) -> Dict[str, int]:
    return {'count': count, 'percent': _percent(count, total)}


def department_compliance_summary(actor) -> List[dict]:
    """Completion and review coverage for every department the actor heads.

    Each department gets one row per semester (semesters without tasks
    report 0%) and department-wide totals.
    """
    departments = _headed_departments(actor)
    by_semester = {
        row['assignment__section__semester_id']: row
        for row in (
            TaskSubmission.objects
            .filter(assignment__section__semester__department__in=departments)
            .values('assignment__section__semester_id')
            .annotate(**_COUNTS)
            .order_by()
        )
    }
    assignments_by_department = dict(
        CourseFileAssignment.objects
        .filter(section__semester__department__in=departments)
        .values('section__semester__department_id')
        .annotate(n=Count('id'))
        .order_by()
        .values_list('section__semester__department_id', 'n')
    )

    summaries = []
    for department in departments:
        totals = {'total': 0, 'completed': 0, 'cc_reviewed': 0, 'hod_reviewed': 0}
        semester_stats = []
        for semester in department.semesters.order_by('number'):
            row = by_semester.get(semester.pk, {})
            counts = {key: row.get(key, 0) for key in totals}
            for key, value in counts.items():
                totals[key] += value
            semester_stats.append({
                'semester_id': semester.pk,
                'semester_number': semester.number,
                'total_tasks': counts['total'],
                'completed': counts['completed'],
                'cc_reviewed': counts['cc_reviewed'],
                'hod_reviewed': counts['hod_reviewed'],
                'completion_percent': _percent(counts['completed'], counts['total']),
                'cc_review_percent': _percent(counts['cc_reviewed'], counts['total']),
                'hod_review_percent': _percent(counts['hod_reviewed'], counts['total']),
            })

        summaries.append({
            'department_id': department.pk,
            'department_name': department.name,
            'total_assignments': assignments_by_department.get(department.pk, 0),
            'total_tasks': totals['total'],
            'completed_tasks': _pair(totals['completed'], totals['total']),
            'cc_reviewed_tasks': _pair(totals['cc_reviewed'], totals['total']),
            'hod_reviewed_tasks': _pair(totals['hod_reviewed'], totals['total']),
            'semester_stats': semester_stats,
        })
    return summaries


def compliance_alerts(actor=None, now=None, department_code=None) -> List[TaskSubmission]:
    """Overdue tasks the faculty member has not completed yet.

    Without an actor the list is global; otherwise it is narrowed to what
    the actor's role is responsible for. `department_code` narrows it
    further to one department.
    """
    now = now or timezone.now()
    qs = TaskSubmission.objects.filter(status=Status.PENDING, deadline__lt=now)
    if department_code:
        qs = qs.filter(assignment__section__semester__department__code=department_code)
    if actor is not None:
        if actor.role == User.Role.HOD:
            qs = qs.filter(assignment__section__semester__department_id__in=actor.departments_headed)
        elif actor.role == User.Role.CC:
            qs = qs.filter(assignment__section_id__in=actor.sections_coordinated)
        elif actor.role == User.Role.FACULTY:
            qs = qs.filter(assignment__faculty_id=actor.id)
        else:
            raise Unauthorized('Students cannot view compliance alerts.')
    return list(
        qs.select_related('template', 'assignment__faculty', 'assignment__subject', 'assignment__section')
        .order_by('deadline', 'id')
    )


def hod_semesters(actor) -> List[dict]:
    return [
        {
            'id': department.pk,
            'code': department.code,
            'name': department.name,
            'semesters': [{'id': s.pk, 'number': s.number} for s in department.semesters.order_by('number')],
        }
        for department in _headed_departments(actor)
    ]


def hod_semester_subjects(semester_id, actor) -> List[dict]:
    semester = Semester.objects.select_related('department').filter(pk=semester_id).first()
    if semester is None:
        raise NotFound('Semester not found.')
    if not is_department_head(actor, semester.department):
        raise Unauthorized('You are not the HOD for this department.')

    subjects = Subject.objects.filter(semester=semester).order_by('name', 'id')
    assignments = (
        CourseFileAssignment.objects
        .filter(subject__in=subjects)
        .select_related('faculty', 'section')
        .annotate(task_count=Count('tasks'))
        .order_by('section__name', 'id')
    )
    by_subject = {}
    for assignment in assignments:
        by_subject.setdefault(assignment.subject_id, []).append({
            'assignment_id': assignment.pk,
            'faculty_name': assignment.faculty.display_name,
            'class_name': assignment.section.name,
            'total_tasks': assignment.task_count,
        })
    return [
        {'subject_id': s.pk, 'subject_name': s.name, 'assignments': by_subject.get(s.pk, [])}
        for s in subjects
    ]


def hod_reviewable_tasks(assignment_id, actor) -> dict:
    """Completed tasks of an assignment, flagged with whether the HOD can act now."""
    assignment = (
        CourseFileAssignment.objects
        .select_related('subject', 'faculty', 'section__semester__department')
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        raise NotFound('Course file assignment not found.')
    if not is_department_head(actor, assignment.section.semester.department):
        raise Unauthorized('Not authorized to review this assignment.')

    tasks = list(
        assignment.tasks
        .filter(status=Status.COMPLETED)
        .select_related('template')
        .order_by('deadline', 'id')
    )
    for task in tasks:
        task.is_reviewable = task.cc_status != ReviewStatus.PENDING and task.hod_status == ReviewStatus.PENDING
    return {'assignment': assignment, 'tasks': tasks}
