from django.contrib import admin

from .models import Department, Semester, Section, Subject


class SemesterInline(admin.TabularInline):
    model = Semester
    extra = 0


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'short_name', 'head_user')
    search_fields = ('code', 'name', 'short_name')
    raw_id_fields = ('head_user',)
    inlines = (SemesterInline,)


@admin.register(Semester)
class SemesterAdmin(admin.ModelAdmin):
    list_display = ('department', 'number')
    list_filter = ('department',)


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ('name', 'semester', 'coordinator')
    list_filter = ('semester__department',)
    search_fields = ('name', 'coordinator__username')
    raw_id_fields = ('coordinator',)


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'semester')
    list_filter = ('semester__department', 'semester')
    search_fields = ('code', 'name')
    filter_horizontal = ('faculty',)
