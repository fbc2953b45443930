from django.contrib import admin

from project.models import Project, ProjectActivityLog


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('name', 'owner', 'created_at', 'updated_at')
    search_fields = ('name', 'description')


@admin.register(ProjectActivityLog)
class ProjectActivityLogAdmin(admin.ModelAdmin):
    list_display = ('project', 'action', 'message', 'created_at')
    search_fields = ('project__name', 'message')
    list_filter = ('action', 'created_at')

    # the log is append-only
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
