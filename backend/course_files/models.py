from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class TaskTemplate(models.Model):
    """A required course-file artifact (e.g. 'Lesson Plan').

    Deactivating a template removes it from future checklists only; tasks
    already created from it are untouched.
    """
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('order', 'id')
        verbose_name = 'Task Template'
        verbose_name_plural = 'Task Templates'

    def __str__(self):
        return f"{self.order}. {self.title}{'' if self.is_active else ' (inactive)'}"


class CourseFileAssignment(models.Model):
    """One faculty member's course file for one subject in one class."""
    subject = models.ForeignKey(
        'academics.Subject',
        on_delete=models.CASCADE,
        related_name='course_file_assignments',
    )
    faculty = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='course_file_assignments',
    )
    section = models.ForeignKey(
        'academics.Section',
        on_delete=models.CASCADE,
        related_name='course_file_assignments',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at',)
        verbose_name = 'Course File Assignment'
        verbose_name_plural = 'Course File Assignments'
        constraints = [
            models.UniqueConstraint(fields=['subject', 'faculty', 'section'], name='unique_course_file_assignment'),
        ]

    def __str__(self):
        return f"{self.subject} -> {self.faculty} ({self.section})"


class TaskSubmission(models.Model):
    """A single checklist item of an assignment.

    `status` is the faculty side; `cc_status` and `hod_status` are the two
    reviewer decisions. Transitions go through
    `course_files.services.task_state`, never through direct saves.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETED = 'COMPLETED', 'Completed'

    class ReviewStatus(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        YES = 'YES', 'Yes'
        NO = 'NO', 'No'

    assignment = models.ForeignKey(
        CourseFileAssignment,
        on_delete=models.CASCADE,
        related_name='tasks',
    )
    template = models.ForeignKey(
        TaskTemplate,
        on_delete=models.PROTECT,
        related_name='submissions',
    )
    deadline = models.DateTimeField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    cc_status = models.CharField(max_length=8, choices=ReviewStatus.choices, default=ReviewStatus.PENDING)
    cc_remarks = models.TextField(null=True, blank=True)
    cc_review_date = models.DateTimeField(null=True, blank=True)

    hod_status = models.CharField(max_length=8, choices=ReviewStatus.choices, default=ReviewStatus.PENDING)
    hod_remarks = models.TextField(null=True, blank=True)
    hod_review_date = models.DateTimeField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('deadline', 'id')
        verbose_name = 'Task Submission'
        verbose_name_plural = 'Task Submissions'
        indexes = [models.Index(fields=['status', 'deadline'], name='cf_task_status_deadline_idx')]
        constraints = [
            models.UniqueConstraint(fields=['assignment', 'template'], name='unique_task_per_assignment_template'),
            # hod decision requires a cc decision, which requires completion
            models.CheckConstraint(
                condition=Q(hod_status='PENDING') | ~Q(cc_status='PENDING'),
                name='hod_review_requires_cc_review',
            ),
            models.CheckConstraint(
                condition=Q(cc_status='PENDING') | Q(status='COMPLETED'),
                name='cc_review_requires_completion',
            ),
        ]

    def __str__(self):
        return f"{self.template.title} [{self.status}/{self.cc_status}/{self.hod_status}]"

    @property
    def state(self):
        return (self.status, self.cc_status, self.hod_status)


class CourseFileLog(models.Model):
    """Append-only activity record for the course file workflow."""

    class Action(models.TextChoices):
        FACULTY_ASSIGNED = 'FACULTY_ASSIGNED', 'Faculty assigned'
        ASSIGNMENT_DELETED = 'ASSIGNMENT_DELETED', 'Assignment deleted'
        TASK_COMPLETED = 'TASK_COMPLETED', 'Task completed'
        TASK_REVERTED = 'TASK_REVERTED', 'Task reverted'
        CC_REVIEWED = 'CC_REVIEWED', 'CC reviewed'
        HOD_REVIEWED = 'HOD_REVIEWED', 'HOD reviewed'
        HOD_BATCH_REVIEW = 'HOD_BATCH_REVIEW', 'HOD batch review'
        DEADLINE_UPDATED = 'DEADLINE_UPDATED', 'Deadline updated'
        TEMPLATE_CREATED = 'TEMPLATE_CREATED', 'Template created'
        TEMPLATE_UPDATED = 'TEMPLATE_UPDATED', 'Template updated'
        TEMPLATE_REMOVED = 'TEMPLATE_REMOVED', 'Template removed'

    action = models.CharField(max_length=32, choices=Action.choices, db_index=True)
    message = models.TextField()
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='course_file_logs',
    )
    # names are copied so the record stays readable after deletions
    actor_name = models.CharField(max_length=255)
    assignment = models.ForeignKey(
        CourseFileAssignment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='logs',
    )
    class_name = models.CharField(max_length=255, null=True, blank=True)
    subject_name = models.CharField(max_length=255, null=True, blank=True)
    task_title = models.CharField(max_length=255, null=True, blank=True)
    metadata = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ('-created_at', '-id')
        verbose_name = 'Course File Log'
        verbose_name_plural = 'Course File Logs'

    def __str__(self):
        return f"{self.action} by {self.actor_name} at {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError('Course file log entries are immutable.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError('Course file log entries cannot be deleted.')
