from django.contrib import admin
from .models import Task, Catalyst, TaskEvent


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'user_id', 'priority', 'status', 'created_at', 'completed_at']
    list_filter = ['status', 'priority']
    search_fields = ['title', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(Catalyst)
class CatalystAdmin(admin.ModelAdmin):
    list_display = ['content', 'task_id', 'estimated_minutes', 'source', 'completed', 'rating']
    list_filter = ['source', 'completed']
    readonly_fields = ['id', 'created_at']


@admin.register(TaskEvent)
class TaskEventAdmin(admin.ModelAdmin):
    list_display = ['task_id', 'catalyst_completed', 'task_started', 'task_completed', 'time_to_start', 'time_to_complete', 'created_at']
    list_filter = ['catalyst_completed', 'task_started', 'task_completed']
    readonly_fields = ['id', 'created_at']
