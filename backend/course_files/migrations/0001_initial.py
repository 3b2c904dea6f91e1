from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TaskTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Task Template',
                'verbose_name_plural': 'Task Templates',
                'ordering': ('order', 'id'),
            },
        ),
        migrations.CreateModel(
            name='CourseFileAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('faculty', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_file_assignments', to=settings.AUTH_USER_MODEL)),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_file_assignments', to='academics.section')),
                ('subject', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_file_assignments', to='academics.subject')),
            ],
            options={
                'verbose_name': 'Course File Assignment',
                'verbose_name_plural': 'Course File Assignments',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddConstraint(
            model_name='coursefileassignment',
            constraint=models.UniqueConstraint(fields=('subject', 'faculty', 'section'), name='unique_course_file_assignment'),
        ),
        migrations.CreateModel(
            name='TaskSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('deadline', models.DateTimeField()),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed')], db_index=True, default='PENDING', max_length=16)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cc_status', models.CharField(choices=[('PENDING', 'Pending'), ('YES', 'Yes'), ('NO', 'No')], default='PENDING', max_length=8)),
                ('cc_remarks', models.TextField(blank=True, null=True)),
                ('cc_review_date', models.DateTimeField(blank=True, null=True)),
                ('hod_status', models.CharField(choices=[('PENDING', 'Pending'), ('YES', 'Yes'), ('NO', 'No')], default='PENDING', max_length=8)),
                ('hod_remarks', models.TextField(blank=True, null=True)),
                ('hod_review_date', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to='course_files.coursefileassignment')),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='submissions', to='course_files.tasktemplate')),
            ],
            options={
                'verbose_name': 'Task Submission',
                'verbose_name_plural': 'Task Submissions',
                'ordering': ('deadline', 'id'),
            },
        ),
        migrations.AddIndex(
            model_name='tasksubmission',
            index=models.Index(fields=['status', 'deadline'], name='cf_task_status_deadline_idx'),
        ),
        migrations.AddConstraint(
            model_name='tasksubmission',
            constraint=models.UniqueConstraint(fields=('assignment', 'template'), name='unique_task_per_assignment_template'),
        ),
        migrations.AddConstraint(
            model_name='tasksubmission',
            constraint=models.CheckConstraint(condition=models.Q(('hod_status', 'PENDING'), models.Q(('cc_status', 'PENDING'), _negated=True), _connector='OR'), name='hod_review_requires_cc_review'),
        ),
        migrations.AddConstraint(
            model_name='tasksubmission',
            constraint=models.CheckConstraint(condition=models.Q(('cc_status', 'PENDING'), ('status', 'COMPLETED'), _connector='OR'), name='cc_review_requires_completion'),
        ),
        migrations.CreateModel(
            name='CourseFileLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('FACULTY_ASSIGNED', 'Faculty assigned'), ('ASSIGNMENT_DELETED', 'Assignment deleted'), ('TASK_COMPLETED', 'Task completed'), ('TASK_REVERTED', 'Task reverted'), ('CC_REVIEWED', 'CC reviewed'), ('HOD_REVIEWED', 'HOD reviewed'), ('HOD_BATCH_REVIEW', 'HOD batch review'), ('DEADLINE_UPDATED', 'Deadline updated'), ('TEMPLATE_CREATED', 'Template created'), ('TEMPLATE_UPDATED', 'Template updated'), ('TEMPLATE_REMOVED', 'Template removed')], db_index=True, max_length=32)),
                ('message', models.TextField()),
                ('actor_name', models.CharField(max_length=255)),
                ('class_name', models.CharField(blank=True, max_length=255, null=True)),
                ('subject_name', models.CharField(blank=True, max_length=255, null=True)),
                ('task_title', models.CharField(blank=True, max_length=255, null=True)),
                ('metadata', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='course_file_logs', to=settings.AUTH_USER_MODEL)),
                ('assignment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='logs', to='course_files.coursefileassignment')),
            ],
            options={
                'verbose_name': 'Course File Log',
                'verbose_name_plural': 'Course File Logs',
                'ordering': ('-created_at', '-id'),
            },
        ),
    ]
