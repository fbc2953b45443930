from project.models import ActivityAction
from utils.change_log import EntityLog, TrackedField

PROJECT_FIELDS = (
    TrackedField('name', 'Name', in_summary=False),
    TrackedField('description', 'Description'),
)

# Project updates are logged even when nothing changed.
PROJECT_LOG = EntityLog(
    kind='Project',
    headline='name',
    fields=PROJECT_FIELDS,
    created_action=ActivityAction.PROJECT_CREATED,
    updated_action=ActivityAction.PROJECT_UPDATED,
    deleted_action=ActivityAction.PROJECT_DELETED,
    scope=lambda project: (project.pk, None),
    log_unchanged_updates=True,
)
