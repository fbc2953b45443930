from django.contrib import admin

from task.models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('title', 'project', 'status', 'priority', 'due_date', 'created_at', 'updated_at')
    search_fields = ('title', 'description')
    list_filter = ('status', 'priority')
