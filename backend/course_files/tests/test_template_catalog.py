from django.test import TestCase

from course_files.exceptions import NotFound, Unauthorized
from course_files.models import CourseFileLog, TaskTemplate
from course_files.services import template_catalog
from course_files.tests.base import CourseFileTreeMixin


class TemplateCatalogTests(TestCase, CourseFileTreeMixin):
    def setUp(self):
        self.build_tree()
        self.hod_actor = self.actor(self.hod)

    def test_list_is_ordered_and_hides_inactive(self):
        TaskTemplate.objects.create(title='First', order=0)
        TaskTemplate.objects.create(title='Hidden', order=1, is_active=False)

        titles = [t.title for t in template_catalog.list_templates()]
        self.assertEqual(titles, ['First', 'Item 1', 'Item 2', 'Item 3'])
        all_titles = [t.title for t in template_catalog.list_templates(include_inactive=True)]
        self.assertIn('Hidden', all_titles)

    def test_create_appends_after_last_order(self):
        template = template_catalog.create_template(self.hod_actor, 'Lab Manual', 'Experiments list')
        self.assertEqual(template.order, 4)
        self.assertTrue(template.is_active)
        self.assertTrue(CourseFileLog.objects.filter(action=CourseFileLog.Action.TEMPLATE_CREATED).exists())

    def test_only_hod_role_manages_templates(self):
        for user in (self.cc, self.faculty, self.student):
            with self.assertRaises(Unauthorized):
                template_catalog.create_template(self.actor(user), 'Nope')
            with self.assertRaises(Unauthorized):
                template_catalog.update_template(self.templates[0].pk, self.actor(user), title='Nope')
            with self.assertRaises(Unauthorized):
                template_catalog.remove_template(self.templates[0].pk, self.actor(user))

    def test_update_changes_only_given_fields(self):
        template = template_catalog.update_template(self.templates[0].pk, self.hod_actor, order=10, is_active=False)
        template.refresh_from_db()
        self.assertEqual(template.order, 10)
        self.assertFalse(template.is_active)
        self.assertEqual(template.title, 'Item 1')

    def test_update_rejects_unknown_fields(self):
        with self.assertRaises(ValueError):
            template_catalog.update_template(self.templates[0].pk, self.hod_actor, created_at=None)

    def test_remove_unused_template_deletes_it(self):
        deleted = template_catalog.remove_template(self.templates[2].pk, self.hod_actor)
        self.assertTrue(deleted)
        self.assertFalse(TaskTemplate.objects.filter(pk=self.templates[2].pk).exists())
        with self.assertRaises(NotFound):
            template_catalog.remove_template(self.templates[2].pk, self.hod_actor)

    def test_remove_used_template_deactivates_it(self):
        self.assign()
        deleted = template_catalog.remove_template(self.templates[0].pk, self.hod_actor)
        self.assertFalse(deleted)
        template = TaskTemplate.objects.get(pk=self.templates[0].pk)
        self.assertFalse(template.is_active)

    def test_seed_is_idempotent(self):
        TaskTemplate.objects.all().delete()

        created = template_catalog.seed_default_templates()
        self.assertEqual(created, 27)
        self.assertEqual(template_catalog.seed_default_templates(), 0)
        titles = [t.title for t in template_catalog.list_templates()]
        self.assertEqual(titles[0], 'Vision & Mission')
        self.assertEqual(titles[-1], 'Course Closure Report')
        self.assertEqual(len(titles), 27)
