from django.apps import AppConfig


class CourseFilesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'course_files'
    verbose_name = 'Course Files'
