"""
Append and query side of the project activity log.

Entries are only ever created here; nothing updates or deletes them apart from
the cascade when their project goes away.
"""
from django.db.models import F

from project.models import ProjectActivityLog


def append(project_id, action, message, task_id=None):
    return ProjectActivityLog.objects.create(
        project_id=project_id,
        task_id=task_id,
        action=action,
        message=message,
    )


def for_project(project_id):
    return ProjectActivityLog.objects.filter(project_id=project_id).order_by('-created_at', '-id')


def for_owner(owner_id):
    """Entries across every project ``owner_id`` owns, with ``project_name`` attached."""
    return (
        ProjectActivityLog.objects
        .filter(project__owner_id=owner_id)
        .annotate(project_name=F('project__name'))
        .order_by('-created_at', '-id')
    )
