from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from academics.models import Department, Section, Semester, Subject
from course_files.exceptions import NotFound, Unauthorized
from course_files.services import compliance, task_state
from course_files.services.compliance import _percent
from course_files.tests.base import CourseFileTreeMixin


class PercentTests(TestCase):
    def test_rounds_half_up(self):
        self.assertEqual(_percent(1, 8), 13)
        self.assertEqual(_percent(1, 3), 33)
        self.assertEqual(_percent(2, 3), 67)
        self.assertEqual(_percent(6, 10), 60)

    def test_empty_total_is_zero(self):
        self.assertEqual(_percent(0, 0), 0)


class DepartmentSummaryTests(TestCase, CourseFileTreeMixin):
    template_count = 10

    def setUp(self):
        self.build_tree()
        self.empty_semester = Semester.objects.create(number=5, department=self.department)
        self.assignment = self.assign()
        tasks = list(self.assignment.tasks.order_by('template__order'))
        f, c = self.actor(self.faculty), self.actor(self.cc)
        for task in tasks[:6]:
            task_state.complete(task.pk, f)
        for task in tasks[:4]:
            task_state.review_as_cc(task.pk, c, 'YES')

    def test_semester_percentages(self):
        [summary] = compliance.department_compliance_summary(self.actor(self.hod))

        rows = {row['semester_id']: row for row in summary['semester_stats']}
        row = rows[self.semester.pk]
        self.assertEqual(row['total_tasks'], 10)
        self.assertEqual((row['completed'], row['cc_reviewed'], row['hod_reviewed']), (6, 4, 0))
        self.assertEqual(row['completion_percent'], 60)
        self.assertEqual(row['cc_review_percent'], 40)
        self.assertEqual(row['hod_review_percent'], 0)

    def test_semester_without_tasks_reports_zero(self):
        [summary] = compliance.department_compliance_summary(self.actor(self.hod))
        rows = {row['semester_id']: row for row in summary['semester_stats']}
        empty = rows[self.empty_semester.pk]
        self.assertEqual(empty['total_tasks'], 0)
        self.assertEqual(empty['completion_percent'], 0)

    def test_department_totals(self):
        [summary] = compliance.department_compliance_summary(self.actor(self.hod))
        self.assertEqual(summary['department_name'], 'Computer Science')
        self.assertEqual(summary['total_assignments'], 1)
        self.assertEqual(summary['total_tasks'], 10)
        self.assertEqual(summary['completed_tasks'], {'count': 6, 'percent': 60})
        self.assertEqual(summary['cc_reviewed_tasks'], {'count': 4, 'percent': 40})
        self.assertEqual(summary['hod_reviewed_tasks'], {'count': 0, 'percent': 0})

    def test_non_hod_has_no_summary(self):
        with self.assertRaises(NotFound):
            compliance.department_compliance_summary(self.actor(self.cc))

    def test_assignment_progress(self):
        for user in (self.faculty, self.cc, self.hod):
            progress = compliance.assignment_progress(self.assignment.pk, self.actor(user))
            self.assertEqual(progress, {'completed': 6, 'total': 10})
        with self.assertRaises(NotFound):
            compliance.assignment_progress(424242, self.actor(self.hod))

    def test_assignment_progress_hidden_from_outsiders(self):
        for user in (self.student, self.other_faculty):
            with self.assertRaises(Unauthorized):
                compliance.assignment_progress(self.assignment.pk, self.actor(user))


class ComplianceAlertTests(TestCase, CourseFileTreeMixin):
    def setUp(self):
        self.build_tree()
        User = get_user_model()
        past = timezone.now() - timedelta(days=2)
        self.mine = self.assign(deadlines={t.pk: past for t in self.templates})
        self.theirs = self.assign(faculty=self.other_faculty, deadlines={t.pk: past for t in self.templates})

        self.ece_hod = User.objects.create_user(username='hod-ece', role=User.Role.HOD)
        self.ece_cc = User.objects.create_user(username='cc-ece', role=User.Role.CC)
        ece = Department.objects.create(code='ECE', name='Electronics', head_user=self.ece_hod)
        ece_sem = Semester.objects.create(number=3, department=ece)
        ece_section = Section.objects.create(name='ECE-A', semester=ece_sem, coordinator=self.ece_cc)
        ece_subject = Subject.objects.create(name='Signals', semester=ece_sem)
        self.ece = self.assign(
            faculty=self.other_faculty, subject=ece_subject, section=ece_section, by=self.ece_cc,
            deadlines={t.pk: past for t in self.templates},
        )
        task_state.complete(self.mine.tasks.first().pk, self.actor(self.faculty))

    def test_global_alerts_list_every_overdue_pending_task(self):
        alerts = compliance.compliance_alerts()
        self.assertEqual(len(alerts), 3 * len(self.templates) - 1)
        self.assertTrue(all(t.status == 'PENDING' for t in alerts))

    def test_future_deadlines_are_not_alerts(self):
        earlier = timezone.now() - timedelta(days=10)
        self.assertEqual(compliance.compliance_alerts(now=earlier), [])

    def test_scoped_by_role(self):
        hod_alerts = compliance.compliance_alerts(self.actor(self.hod))
        self.assertEqual({t.assignment_id for t in hod_alerts}, {self.mine.pk, self.theirs.pk})

        ece_alerts = compliance.compliance_alerts(self.actor(self.ece_cc))
        self.assertEqual({t.assignment_id for t in ece_alerts}, {self.ece.pk})

        own = compliance.compliance_alerts(self.actor(self.faculty))
        self.assertEqual(len(own), len(self.templates) - 1)

        with self.assertRaises(Unauthorized):
            compliance.compliance_alerts(self.actor(self.student))

    def test_department_code_filter(self):
        ece_alerts = compliance.compliance_alerts(department_code='ECE')
        self.assertEqual({t.assignment_id for t in ece_alerts}, {self.ece.pk})

        hod_in_ece = compliance.compliance_alerts(self.actor(self.hod), department_code='ECE')
        self.assertEqual(hod_in_ece, [])


class HodBrowseTests(TestCase, CourseFileTreeMixin):
    def setUp(self):
        self.build_tree()
        self.assignment = self.assign()

    def test_semesters_of_headed_departments(self):
        [dept] = compliance.hod_semesters(self.actor(self.hod))
        self.assertEqual(dept['code'], 'CSE')
        self.assertEqual(dept['semesters'], [{'id': self.semester.pk, 'number': 3}])
        with self.assertRaises(NotFound):
            compliance.hod_semesters(self.actor(self.faculty))

    def test_semester_subjects(self):
        [subject] = compliance.hod_semester_subjects(self.semester.pk, self.actor(self.hod))
        self.assertEqual(subject['subject_name'], 'Data Structures')
        self.assertEqual(subject['assignments'][0]['total_tasks'], len(self.templates))
        self.assertEqual(subject['assignments'][0]['class_name'], 'CSE-A')

        with self.assertRaises(Unauthorized):
            compliance.hod_semester_subjects(self.semester.pk, self.actor(self.cc))
        with self.assertRaises(NotFound):
            compliance.hod_semester_subjects(424242, self.actor(self.hod))

    def test_reviewable_tasks(self):
        t1, t2, _ = list(self.assignment.tasks.order_by('template__order'))
        task_state.complete(t1.pk, self.actor(self.faculty))
        task_state.complete(t2.pk, self.actor(self.faculty))
        task_state.review_as_cc(t1.pk, self.actor(self.cc), 'YES')

        result = compliance.hod_reviewable_tasks(self.assignment.pk, self.actor(self.hod))

        flags = {t.pk: t.is_reviewable for t in result['tasks']}
        self.assertEqual(flags, {t1.pk: True, t2.pk: False})
        with self.assertRaises(Unauthorized):
            compliance.hod_reviewable_tasks(self.assignment.pk, self.actor(self.cc))
