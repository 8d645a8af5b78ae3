from django.contrib import admin
from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ['action', 'user', 'timestamp']
    list_filter = ['action', 'timestamp']
    search_fields = ['action', 'user__username', 'user__first_name', 'user__last_name']
    readonly_fields = ['user', 'action', 'details', 'timestamp']
