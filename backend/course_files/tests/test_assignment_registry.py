from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import TestCase, override_settings
from django.utils import timezone

from academics.models import Department, Section, Semester
from course_files.exceptions import Conflict, NotFound, Unauthorized
from course_files.models import CourseFileAssignment, CourseFileLog, TaskSubmission, TaskTemplate
from course_files.services import assignment_registry, task_state, template_catalog
from course_files.tests.base import CourseFileTreeMixin


class AssignmentRegistryTests(TestCase, CourseFileTreeMixin):
    def setUp(self):
        self.build_tree()

    def test_creates_one_pending_task_per_active_template(self):
        TaskTemplate.objects.create(title='Retired', order=99, is_active=False)

        assignment = self.assign()

        tasks = list(assignment.tasks.all())
        self.assertEqual(len(tasks), len(self.templates))
        self.assertEqual({t.template_id for t in tasks}, {t.pk for t in self.templates})
        for task in tasks:
            self.assertEqual(task.state, ('PENDING', 'PENDING', 'PENDING'))
        self.assertEqual(assignment.created_by_id, self.cc.pk)

    @override_settings(COURSE_FILE_DEFAULT_DEADLINE_DAYS=15)
    def test_deadlines_default_and_override(self):
        custom = timezone.now() + timedelta(days=3)
        before = timezone.now()

        assignment = self.assign(deadlines={self.templates[0].pk: custom})

        by_template = {t.template_id: t for t in assignment.tasks.all()}
        self.assertEqual(by_template[self.templates[0].pk].deadline, custom)
        default = by_template[self.templates[1].pk].deadline
        self.assertGreaterEqual(default, before + timedelta(days=15))
        self.assertLess(default, before + timedelta(days=15, minutes=5))

    def test_second_creation_for_same_triple_conflicts(self):
        self.assign()
        with self.assertRaises(Conflict):
            self.assign()
        with self.assertRaises(Conflict):
            self.assign(by=self.hod)
        self.assertEqual(CourseFileAssignment.objects.count(), 1)
        self.assertEqual(TaskSubmission.objects.count(), len(self.templates))

    def test_same_faculty_other_class_is_allowed(self):
        other = Section.objects.create(name='CSE-B', semester=self.semester, coordinator=self.cc)
        self.assign()
        self.assign(section=other)
        self.assertEqual(CourseFileAssignment.objects.count(), 2)

    def test_hod_of_department_can_assign(self):
        assignment = self.assign(by=self.hod)
        self.assertEqual(assignment.tasks.count(), len(self.templates))

    def test_unrelated_users_cannot_assign(self):
        User = get_user_model()
        other_hod = User.objects.create_user(username='hod-ece', role=User.Role.HOD)
        Department.objects.create(code='ECE', name='Electronics', head_user=other_hod)

        for user in (self.faculty, self.student, other_hod):
            with self.assertRaises(Unauthorized):
                self.assign(by=user)
        self.assertFalse(CourseFileAssignment.objects.exists())

    def test_missing_references_are_not_found(self):
        with self.assertRaises(NotFound):
            assignment_registry.create_assignment(self.subject.pk, self.faculty.pk, 424242, self.actor(self.cc))
        with self.assertRaises(NotFound):
            assignment_registry.create_assignment(424242, self.faculty.pk, self.section.pk, self.actor(self.cc))
        with self.assertRaises(NotFound):
            assignment_registry.create_assignment(self.subject.pk, 424242, self.section.pk, self.actor(self.cc))

    def test_task_creation_is_all_or_nothing(self):
        original = TaskSubmission.objects.bulk_create

        def failing_bulk_create(objs, *args, **kwargs):
            raise IntegrityError('simulated failure')

        TaskSubmission.objects.bulk_create = failing_bulk_create
        try:
            with self.assertRaises(Conflict):
                self.assign()
        finally:
            TaskSubmission.objects.bulk_create = original

        self.assertFalse(CourseFileAssignment.objects.exists())
        self.assertFalse(TaskSubmission.objects.exists())

    def test_catalog_edits_do_not_touch_existing_checklists(self):
        assignment = self.assign()
        hod = self.actor(self.hod)

        template_catalog.create_template(hod, 'Late Addition')
        template_catalog.update_template(self.templates[0].pk, hod, title='Renamed')
        template_catalog.remove_template(self.templates[1].pk, hod)

        self.assertEqual(assignment.tasks.count(), len(self.templates))
        self.assertEqual(
            set(assignment.tasks.values_list('template_id', flat=True)),
            {t.pk for t in self.templates},
        )

        newer = self.assign(faculty=self.other_faculty)
        titles = set(newer.tasks.values_list('template__title', flat=True))
        self.assertIn('Late Addition', titles)
        self.assertIn('Renamed', titles)
        self.assertNotIn('Item 2', titles)

    def test_delete_cascades_and_keeps_log(self):
        assignment = self.assign()
        task_state.complete(assignment.tasks.first().pk, self.actor(self.faculty))
        assignment_id = assignment.pk

        assignment_registry.delete_assignment(assignment_id, self.actor(self.cc))

        self.assertFalse(CourseFileAssignment.objects.filter(pk=assignment_id).exists())
        self.assertFalse(TaskSubmission.objects.filter(assignment_id=assignment_id).exists())
        entry = CourseFileLog.objects.get(action=CourseFileLog.Action.ASSIGNMENT_DELETED)
        self.assertIsNone(entry.assignment_id)
        self.assertEqual(entry.subject_name, 'Data Structures')
        self.assertEqual(entry.class_name, 'CSE-A')
        self.assertEqual(entry.metadata['assignment_id'], assignment_id)

    def test_delete_requires_authority(self):
        assignment = self.assign()
        with self.assertRaises(Unauthorized):
            assignment_registry.delete_assignment(assignment.pk, self.actor(self.faculty))
        with self.assertRaises(NotFound):
            assignment_registry.delete_assignment(424242, self.actor(self.cc))
        self.assertTrue(CourseFileAssignment.objects.filter(pk=assignment.pk).exists())

    def test_section_listing_counts_completed_tasks(self):
        assignment = self.assign()
        task_state.complete(assignment.tasks.first().pk, self.actor(self.faculty))

        listed = assignment_registry.list_section_assignments(self.section.pk, self.actor(self.cc))

        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0].task_count, len(self.templates))
        self.assertEqual(listed[0].completed_count, 1)

    def test_section_listing_is_scoped_to_viewer(self):
        mine = self.assign()
        self.assign(faculty=self.other_faculty)

        self.assertEqual(len(assignment_registry.list_section_assignments(self.section.pk, self.actor(self.hod))), 2)
        own = assignment_registry.list_section_assignments(self.section.pk, self.actor(self.faculty))
        self.assertEqual([a.pk for a in own], [mine.pk])

        with self.assertRaises(Unauthorized):
            assignment_registry.list_section_assignments(self.section.pk, self.actor(self.student))
        with self.assertRaises(NotFound):
            assignment_registry.list_section_assignments(424242, self.actor(self.cc))

    def test_faculty_tasks_ordered_by_deadline(self):
        later = timezone.now() + timedelta(days=30)
        sooner = timezone.now() + timedelta(days=1)
        other_semester = Semester.objects.create(number=5, department=self.department)
        other_section = Section.objects.create(name='CSE-C', semester=other_semester, coordinator=self.cc)
        self.assign(deadlines={t.pk: later for t in self.templates})
        self.assign(section=other_section, deadlines={t.pk: sooner for t in self.templates})
        self.assign(faculty=self.other_faculty)

        tasks = assignment_registry.list_faculty_tasks(self.actor(self.faculty))

        self.assertEqual(len(tasks), 2 * len(self.templates))
        deadlines = [t.deadline for t in tasks]
        self.assertEqual(deadlines, sorted(deadlines))
        self.assertEqual(tasks[0].assignment.section_id, other_section.pk)
