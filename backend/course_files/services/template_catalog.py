"""Catalog of required course-file artifacts.

Edits here only affect assignments created afterwards: existing
assignments keep the task set they were created with.
"""
import logging
from typing import List, Optional

from django.db import transaction
from django.db.models import Max

from accounts.models import User
from course_files.exceptions import NotFound, Unauthorized
from course_files.models import TaskTemplate
from course_files.services import audit_log

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'description', 'order', 'is_active')

DEFAULT_TEMPLATES = [
    ('Vision & Mission', 'Institute and Department Vision & Mission statements'),
    ('PEOs, POs & PSOs', 'Program Educational Objectives, Program Outcomes, Program Specific Outcomes'),
    ('Academic Calendar', 'University and Department Academic Calendar'),
    ('Class Time Table', 'Master time table for the semester'),
    ('Individual Time Table', 'Faculty individual time table'),
    ('Syllabus', 'Copy of the university syllabus'),
    ('Course Outcomes (COs)', 'List of Course Outcomes'),
    ('CO-PO Mapping', 'Mapping matrix of COs with POs and PSOs'),
    ('Lesson Plan', 'Day-wise teaching plan/schedule'),
    ('Question Bank', 'Unit-wise important questions'),
    ('Previous Question Papers', 'Last 3 years university question papers'),
    ('IA Question Papers', 'Internal Assessment question papers with scheme of evaluation'),
    ('IA Sample Scripts', 'Sample answer booklets (Best, Average, Poor)'),
    ('Assignments', 'Assignment questions given to students'),
    ('Assignment Samples', 'Sample assignment submissions'),
    ('Student List', 'List of enrolled students'),
    ('Attendance Register', 'Copy of attendance record'),
    ('Result Analysis (Previous)', 'Analysis of previous batch/semester results'),
    ('IA Result Analysis', 'Analysis of current semester IA marks'),
    ('Slow & Advanced Learners', 'List of identified learners and remedial measures taken'),
    ('Counseling Register', 'Mentor-Mentee counseling details'),
    ('Content Beyond Syllabus', 'Details of topics covered beyond syllabus'),
    ('Course Material', 'Lecture notes / PPTs / Handouts'),
    ('Feedback Analysis', 'Student feedback report and action taken'),
    ('Course End Survey', 'Indirect assessment via course end survey'),
    ('CO Attainment', 'Final CO attainment calculations'),
    ('Course Closure Report', 'Faculty feedback and course closure summary'),
]


def _require_hod(actor):
    if actor is None or actor.role != User.Role.HOD:
        logger.warning('template edit rejected: %s', {'actor_id': getattr(actor, 'id', None)})
        raise Unauthorized('Only a HOD can manage course file templates.')


def _get_template(template_id) -> TaskTemplate:
    template = TaskTemplate.objects.filter(pk=template_id).first()
    if template is None:
        raise NotFound('Task template not found.')
    return template


def list_templates(include_inactive: bool = False) -> List[TaskTemplate]:
    qs = TaskTemplate.objects.all()
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return list(qs.order_by('order', 'id'))


def _next_order() -> int:
    current = TaskTemplate.objects.aggregate(m=Max('order'))['m']
    return (current or 0) + 1


@transaction.atomic
def create_template(actor, title: str, description: str = '', order: Optional[int] = None) -> TaskTemplate:
    _require_hod(actor)
    if order is None:
        order = _next_order()
    template = TaskTemplate.objects.create(title=title, description=description or '', order=order)
    audit_log.record(
        audit_log.Action.TEMPLATE_CREATED,
        f'{actor.name} added course file task "{template.title}"',
        actor,
        task_title=template.title,
        metadata={'template_id': template.pk, 'order': template.order},
    )
    logger.info('%s', {'event': 'template_created', 'template_id': template.pk, 'actor_id': actor.id})
    return template


@transaction.atomic
def update_template(template_id, actor, **fields) -> TaskTemplate:
    _require_hod(actor)
    template = _get_template(template_id)
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f'Cannot update template fields: {", ".join(sorted(unknown))}')

    changed = {}
    for name, value in fields.items():
        if getattr(template, name) != value:
            setattr(template, name, value)
            changed[name] = value
    if changed:
        template.save(update_fields=[*changed, 'updated_at'])
        audit_log.record(
            audit_log.Action.TEMPLATE_UPDATED,
            f'{actor.name} updated course file task "{template.title}"',
            actor,
            task_title=template.title,
            metadata={'template_id': template.pk, 'changed': changed},
        )
    return template


@transaction.atomic
def remove_template(template_id, actor) -> bool:
    """Remove a template from the catalog.

    Templates already used by an assignment are deactivated rather than
    deleted. Returns True when the row was actually deleted.
    """
    _require_hod(actor)
    template = _get_template(template_id)
    title = template.title
    in_use = template.submissions.exists()
    if in_use:
        if template.is_active:
            template.is_active = False
            template.save(update_fields=['is_active', 'updated_at'])
    else:
        template.delete()

    audit_log.record(
        audit_log.Action.TEMPLATE_REMOVED,
        f'{actor.name} removed course file task "{title}"',
        actor,
        task_title=title,
        metadata={'template_id': template_id, 'deleted': not in_use},
    )
    return not in_use


@transaction.atomic
def seed_default_templates() -> int:
    """Create the standard checklist. Does nothing if any template exists."""
    if TaskTemplate.objects.exists():
        return 0
    TaskTemplate.objects.bulk_create([
        TaskTemplate(title=title, description=description, order=index)
        for index, (title, description) in enumerate(DEFAULT_TEMPLATES, start=1)
    ])
    logger.info('%s', {'event': 'templates_seeded', 'count': len(DEFAULT_TEMPLATES)})
    return len(DEFAULT_TEMPLATES)
