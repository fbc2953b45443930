from project.models import ActivityAction
from utils.change_log import EntityLog, TrackedField, CHOICE, DATE

TASK_FIELDS = (
    TrackedField('title', 'Title', in_summary=False),
    TrackedField('description', 'Description'),
    TrackedField('status', 'Status', kind=CHOICE),
    TrackedField('priority', 'Priority', kind=CHOICE),
    TrackedField('due_date', 'Due Date', kind=DATE),
)

# Unlike projects, a task update that changes nothing leaves no entry.
TASK_LOG = EntityLog(
    kind='Task',
    headline='title',
    fields=TASK_FIELDS,
    created_action=ActivityAction.TASK_CREATED,
    updated_action=ActivityAction.TASK_UPDATED,
    deleted_action=ActivityAction.TASK_DELETED,
    scope=lambda task: (task.project_id, task.pk),
    log_unchanged_updates=False,
    show_current_on_update=True,
)
