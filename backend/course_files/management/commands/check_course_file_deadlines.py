from django.core.management.base import BaseCommand
from django.utils import timezone

from academics.models import Department
from course_files.services import compliance


class Command(BaseCommand):
    help = 'List course file tasks whose deadline has passed without completion.'

    def add_arguments(self, parser):
        parser.add_argument('--department', help='Department code to limit the report to.')

    def handle(self, *args, **options):
        now = timezone.now()
        code = options.get('department')
        if code and not Department.objects.filter(code=code).exists():
            self.stderr.write(f'Unknown department {code}')
            return
        alerts = compliance.compliance_alerts(now=now, department_code=code)

        for task in alerts:
            assignment = task.assignment
            self.stdout.write(
                f'Overdue task {task.id}: "{task.template.title}" for {assignment.subject.name} '
                f'({assignment.section.name}) by {assignment.faculty.display_name}, due {task.deadline:%Y-%m-%d}'
            )

        self.stdout.write(f'Done. Overdue tasks: {len(alerts)} as of {now:%Y-%m-%d %H:%M}')
