from django.contrib import admin

from . import models


class TaskSubmissionInline(admin.TabularInline):
    model = models.TaskSubmission
    extra = 0
    fields = ('template', 'deadline', 'status', 'cc_status', 'hod_status')
    readonly_fields = ('template', 'status', 'cc_status', 'hod_status')
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class TaskTemplateAdmin(admin.ModelAdmin):
    list_display = ('order', 'title', 'is_active', 'updated_at')
    list_filter = ('is_active',)
    search_fields = ('title',)
    ordering = ('order', 'id')


class CourseFileAssignmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'subject', 'faculty', 'section', 'created_by', 'created_at')
    list_filter = ('section__semester__department',)
    search_fields = ('subject__name', 'faculty__username', 'section__name')
    raw_id_fields = ('subject', 'faculty', 'section', 'created_by')
    inlines = (TaskSubmissionInline,)
    readonly_fields = ('created_at',)


class TaskSubmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'assignment', 'template', 'deadline', 'status', 'cc_status', 'hod_status')
    list_filter = ('status', 'cc_status', 'hod_status')
    search_fields = ('template__title', 'assignment__faculty__username')
    # review columns only change through the workflow services
    readonly_fields = (
        'assignment', 'template', 'status', 'completed_at',
        'cc_status', 'cc_remarks', 'cc_review_date',
        'hod_status', 'hod_remarks', 'hod_review_date', 'updated_at',
    )


class CourseFileLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'actor_name', 'class_name', 'subject_name', 'task_title')
    list_filter = ('action',)
    search_fields = ('actor_name', 'message', 'subject_name')
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(models.TaskTemplate, TaskTemplateAdmin)
admin.site.register(models.CourseFileAssignment, CourseFileAssignmentAdmin)
admin.site.register(models.TaskSubmission, TaskSubmissionAdmin)
admin.site.register(models.CourseFileLog, CourseFileLogAdmin)
