"""
Django Admin configuration for PARCELS app.

Entries are read-only here: their earning is fixed when logged.
"""

from django.contrib import admin

from .models import ParcelEntry


@admin.register(ParcelEntry)
class ParcelEntryAdmin(admin.ModelAdmin):
    list_display = (
        'task_id', 'seller_id', 'courier', 'quantity',
        'picked_up_same_day', 'total_earning', 'date', 'user'
    )
    list_filter = ('courier', 'picked_up_same_day', 'date')
    search_fields = ('task_id', 'seller_id', 'user__email', 'user__name')
    date_hierarchy = 'date'
    ordering = ('-date', '-created_at')
    readonly_fields = (
        'task_id', 'seller_id', 'courier', 'quantity', 'picked_up_same_day',
        'date', 'total_earning', 'user', 'created_at'
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
