"""
Django Admin configuration for CORE app.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, AppSetting, MASKED_SETTINGS


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom admin for User model with e-mail based auth."""

    list_display = ('email', 'name', 'employee_id', 'role', 'last_active', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('email', 'name', 'employee_id')
    ordering = ('-created_at',)
    readonly_fields = ('last_active', 'created_at', 'updated_at')

    fieldsets = (
        (None, {
            'fields': ('email', 'password')
        }),
        ('Profile', {
            'fields': ('name', 'role', 'employee_id', 'phone', 'address', 'picture')
        }),
        ('Activity', {
            'fields': ('last_active', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ('key', 'display_value', 'updated_at')
    search_fields = ('key',)
    readonly_fields = ('created_at', 'updated_at')

    @admin.display(description='Value')
    def display_value(self, obj):
        return '***' if obj.key in MASKED_SETTINGS and obj.value else obj.value
