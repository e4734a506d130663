from django.contrib import admin
from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['user_name', 'activity_type', 'task_title', 'points', 'created_at']
    list_filter = ['activity_type']
    readonly_fields = ['id', 'created_at']
