from django.conf import settings
from django.db import models


class Project(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(max_length=1000, null=True, blank=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='projects')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        ordering = ['-created_at']


class ActivityAction(models.TextChoices):
    PROJECT_CREATED = 'PROJECT_CREATED', 'Project created'
    PROJECT_UPDATED = 'PROJECT_UPDATED', 'Project updated'
    PROJECT_DELETED = 'PROJECT_DELETED', 'Project deleted'
    TASK_CREATED = 'TASK_CREATED', 'Task created'
    TASK_UPDATED = 'TASK_UPDATED', 'Task updated'
    TASK_DELETED = 'TASK_DELETED', 'Task deleted'


class ProjectActivityLog(models.Model):
    """Append-only record of one mutation. Never updated."""
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='activity_logs')
    # plain id so the entry outlives the task it describes
    task_id = models.BigIntegerField(null=True, blank=True)
    action = models.CharField(max_length=32, choices=ActivityAction.choices)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} - {self.message}"

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['project', '-created_at'], name='activity_project_created_idx'),
        ]
