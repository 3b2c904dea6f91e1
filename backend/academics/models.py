from django.db import models
from django.conf import settings


class Department(models.Model):
    code = models.CharField(max_length=16, unique=True)
    name = models.CharField(max_length=128)
    # Short form for display (abbreviation) e.g. 'CSE', 'EEE'
    short_name = models.CharField(max_length=32, blank=True)
    # The HOD. Authority to review course files and see compliance
    # comes from this link alone.
    head_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='headed_departments',
    )

    class Meta:
        ordering = ('code',)

    def __str__(self):
        display = self.short_name or self.name
        return f"{self.code} - {display}"


class Semester(models.Model):
    number = models.PositiveSmallIntegerField()
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='semesters')

    class Meta:
        ordering = ('department', 'number')
        unique_together = (('department', 'number'),)

    def __str__(self):
        return f"{self.department.code} / Sem {self.number}"


class Section(models.Model):
    """A class (e.g. 'CSE-A') within a semester.

    `coordinator` is the Class Coordinator (CC): first-tier reviewer for
    every course file assigned in this class.
    """
    name = models.CharField(max_length=32)
    semester = models.ForeignKey(Semester, on_delete=models.CASCADE, related_name='sections')
    coordinator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='coordinated_sections',
    )

    class Meta:
        verbose_name = 'Class'
        verbose_name_plural = 'Classes'
        ordering = ('semester', 'name')
        unique_together = (('name', 'semester'),)

    def __str__(self):
        return f"{self.semester} / {self.name}"

    @property
    def department(self):
        return self.semester.department


class Subject(models.Model):
    code = models.CharField(max_length=32, blank=True)
    name = models.CharField(max_length=128)
    semester = models.ForeignKey(Semester, on_delete=models.CASCADE, related_name='subjects')
    faculty = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='subjects_taught')

    class Meta:
        ordering = ('semester', 'name')

    def __str__(self):
        return f"{self.code} - {self.name}" if self.code else self.name
