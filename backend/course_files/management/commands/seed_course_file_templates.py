from django.core.management.base import BaseCommand

from course_files.models import TaskTemplate
from course_files.services import template_catalog


class Command(BaseCommand):
    help = 'Create the standard course file checklist templates if none exist.'

    def handle(self, *args, **options):
        created = template_catalog.seed_default_templates()
        if created:
            self.stdout.write(self.style.SUCCESS(f'Seeding complete. {created} templates created.'))
        else:
            self.stdout.write(f'Course file templates already exist ({TaskTemplate.objects.count()}). Skipping.')
