from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError


class User(AbstractUser):
    """
    Base user model.
    Students, faculty, class coordinators and HODs are all users.
    `role` decides which workflow rules apply; authority over a class or a
    department is read from the academic tree (Section.coordinator,
    Department.head_user), not from this model.
    """

    class Role(models.TextChoices):
        FACULTY = 'FACULTY', 'Faculty'
        CC = 'CC', 'Class Coordinator'
        HOD = 'HOD', 'Head of Department'
        STUDENT = 'STUDENT', 'Student'

    role = models.CharField(max_length=16, choices=Role.choices, default=Role.FACULTY, db_index=True)
    # Class a student belongs to, or the class a coordinator looks after.
    home_section = models.ForeignKey(
        'academics.Section',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='home_users',
    )

    def __str__(self):
        return self.username

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def clean(self):
        super().clean()
        if self.home_section_id and self.role not in (self.Role.STUDENT, self.Role.CC):
            raise ValidationError({'home_section': 'Only students and class coordinators have a home class.'})
