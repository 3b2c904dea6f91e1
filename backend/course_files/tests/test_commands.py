from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from academics.models import Department, Section, Semester, Subject
from course_files.models import TaskTemplate
from course_files.tests.base import CourseFileTreeMixin


class SeedTemplatesCommandTests(TestCase):
    def test_seeds_once(self):
        out = StringIO()
        call_command('seed_course_file_templates', stdout=out)
        self.assertIn('27 templates created', out.getvalue())

        out = StringIO()
        call_command('seed_course_file_templates', stdout=out)
        self.assertIn('Skipping', out.getvalue())
        self.assertEqual(TaskTemplate.objects.count(), 27)


class CheckDeadlinesCommandTests(TestCase, CourseFileTreeMixin):
    def setUp(self):
        self.build_tree()
        past = timezone.now() - timedelta(days=1)
        self.assign(deadlines={self.templates[0].pk: past})

    def test_reports_overdue_tasks(self):
        out = StringIO()
        call_command('check_course_file_deadlines', stdout=out)
        output = out.getvalue()
        self.assertIn('"Item 1" for Data Structures (CSE-A)', output)
        self.assertIn('Overdue tasks: 1', output)

    def test_department_filter(self):
        out = StringIO()
        call_command('check_course_file_deadlines', '--department', 'ECE', stderr=out, stdout=StringIO())
        self.assertIn('Unknown department ECE', out.getvalue())

        ece = Department.objects.create(code='ECE', name='Electronics')
        ece_sem = Semester.objects.create(number=3, department=ece)
        ece_section = Section.objects.create(name='ECE-A', semester=ece_sem, coordinator=self.cc)
        ece_subject = Subject.objects.create(name='Signals', semester=ece_sem)
        self.assign(
            subject=ece_subject, section=ece_section,
            deadlines={self.templates[0].pk: timezone.now() - timedelta(days=1)},
        )

        out = StringIO()
        call_command('check_course_file_deadlines', '--department', 'CSE', stdout=out)
        self.assertIn('Overdue tasks: 1', out.getvalue())
        self.assertNotIn('Signals', out.getvalue())

        out = StringIO()
        call_command('check_course_file_deadlines', '--department', 'ECE', stdout=out)
        self.assertIn('"Item 1" for Signals (ECE-A)', out.getvalue())
        self.assertIn('Overdue tasks: 1', out.getvalue())
