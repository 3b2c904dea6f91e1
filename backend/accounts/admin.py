from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'role', 'home_section', 'is_staff')
    list_filter = ('role', 'is_staff', 'is_active')
    list_select_related = ('home_section',)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Course file workflow', {'fields': ('role', 'home_section')}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Course file workflow', {'fields': ('role',)}),
    )
