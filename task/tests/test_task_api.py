from datetime import date
from unittest import mock

import pytest
from django.db import DatabaseError

from project.models import ActivityAction, Project, ProjectActivityLog
from task.models import Task

pytestmark = pytest.mark.django_db


def tasks_url(project):
    return f'/api/projects/{project.pk}/tasks'


def task_url(task):
    return f'/api/projects/{task.project_id}/tasks/{task.pk}'


def test_create_task_with_defaults(api_client, owner, project):
    res = api_client(owner).post(tasks_url(project), {'title': 'Draft plan'}, format='json')

    assert res.status_code == 201
    body = res.json()
    assert body['status'] == 'TODO'
    assert body['priority'] == 'MEDIUM'
    assert body['due_date'] is None

    entry = ProjectActivityLog.objects.get()
    assert entry.action == ActivityAction.TASK_CREATED
    assert entry.task_id == body['id']
    assert entry.message == 'Task "Draft plan" created (Status: TODO, Priority: MEDIUM)'


def test_create_accepts_iso_datetime_for_due_date(api_client, owner, project):
    res = api_client(owner).post(
        tasks_url(project),
        {'title': 'Ship', 'due_date': '2025-01-01T00:00:00Z', 'priority': 'HIGH'},
        format='json',
    )

    assert res.status_code == 201
    assert res.json()['due_date'] == '2025-01-01'
    assert ProjectActivityLog.objects.get().message == (
        'Task "Ship" created (Status: TODO, Priority: HIGH, Due Date: 2025-01-01)'
    )


def test_create_rejects_unknown_status(api_client, owner, project):
    res = api_client(owner).post(tasks_url(project), {'title': 'x', 'status': 'BLOCKED'}, format='json')

    assert res.status_code == 400
    assert 'status' in res.json()['details']


def test_create_in_missing_project_is_404(api_client, owner):
    res = api_client(owner).post('/api/projects/9999/tasks', {'title': 'x'}, format='json')

    assert res.status_code == 404


def test_only_project_owner_can_create_tasks(api_client, other_editor, project):
    res = api_client(other_editor).post(tasks_url(project), {'title': 'x'}, format='json')

    assert res.status_code == 403
    assert res.json() == {'error': 'Forbidden: only the project owner can create tasks'}


def test_status_change_message(api_client, owner, project):
    task = Task.objects.create(project=project, title='X', priority='LOW')

    res = api_client(owner).patch(task_url(task), {'status': 'DONE'}, format='json')

    assert res.status_code == 200
    entry = ProjectActivityLog.objects.get(action=ActivityAction.TASK_UPDATED)
    assert entry.message == 'Task "X" updated - Status: TODO → DONE. Current: Status: DONE, Priority: LOW'
    assert entry.task_id == task.pk


def test_only_touched_changed_fields_are_described(api_client, owner, task):
    res = api_client(owner).patch(
        task_url(task),
        {'description': 'short', 'due_date': '2025-01-01'},
        format='json',
    )

    assert res.status_code == 200
    assert ProjectActivityLog.objects.get().message == (
        'Task "Write docs" updated - Due Date: (none) → 2025-01-01. '
        'Current: Status: TODO, Priority: MEDIUM, Due Date: 2025-01-01'
    )


def test_task_update_with_empty_diff_writes_no_activity(api_client, owner, task):
    res = api_client(owner).patch(task_url(task), {'title': 'Write docs', 'status': 'TODO'}, format='json')

    assert res.status_code == 200
    assert not ProjectActivityLog.objects.exists()


def test_read_only_user_cannot_touch_tasks(api_client, reader, task):
    client = api_client(reader)

    assert client.post(tasks_url(task.project), {'title': 'x'}, format='json').status_code == 403
    assert client.patch(task_url(task), {'status': 'DONE'}, format='json').status_code == 403
    assert client.delete(task_url(task)).status_code == 403

    assert client.get(tasks_url(task.project)).status_code == 200
    assert client.get(task_url(task)).status_code == 200


def test_non_owner_cannot_update_or_delete_tasks(api_client, other_editor, task):
    client = api_client(other_editor)

    assert client.patch(task_url(task), {'status': 'DONE'}, format='json').status_code == 403
    assert client.delete(task_url(task)).status_code == 403
    assert Task.objects.filter(pk=task.pk, status='TODO').exists()


def test_task_of_another_project_is_404(api_client, owner, project, task):
    elsewhere = Project.objects.create(name='Elsewhere', owner=owner)

    res = api_client(owner).get(f'/api/projects/{elsewhere.pk}/tasks/{task.pk}')

    assert res.status_code == 404


def test_delete_task(api_client, owner, task):
    task_pk = task.pk
    res = api_client(owner).delete(task_url(task))

    assert res.status_code == 200
    assert res.json() == {'message': 'Task deleted'}
    assert not Task.objects.filter(pk=task_pk).exists()
    entry = ProjectActivityLog.objects.get()
    assert entry.task_id == task_pk
    assert entry.message == 'Task "Write docs" deleted (Status: TODO, Priority: MEDIUM, Description: short)'


def test_task_delete_log_survives_failed_delete(api_client, owner, task):
    with mock.patch.object(Task, 'delete', side_effect=DatabaseError('locked')):
        res = api_client(owner).delete(task_url(task))

    assert res.status_code == 500
    assert Task.objects.filter(pk=task.pk).exists()
    assert ProjectActivityLog.objects.filter(action=ActivityAction.TASK_DELETED, task_id=task.pk).exists()


class TestListing:

    @pytest.fixture
    def tasks(self, project):
        return [
            Task.objects.create(project=project, title='Alpha', status='TODO', priority='HIGH', due_date=date(2025, 3, 1)),
            Task.objects.create(project=project, title='Beta', status='IN_PROGRESS', priority='LOW', description='needs review'),
            Task.objects.create(project=project, title='Gamma', status='DONE', priority='MEDIUM', due_date=date(2025, 1, 1)),
        ]

    def titles(self, res):
        return [item['title'] for item in res.json()['items']]

    def test_default_is_created_at_desc(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project))

        assert self.titles(res) == ['Gamma', 'Beta', 'Alpha']
        assert res.json()['pageSize'] == 10
        assert res.json()['total'] == 3

    def test_status_allow_list_drops_unknown_values(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'status': 'TODO,DONE,BOGUS'})

        assert sorted(self.titles(res)) == ['Alpha', 'Gamma']

    def test_all_unknown_values_apply_no_filter(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'priority': 'URGENT'})

        assert len(self.titles(res)) == 3

    def test_search_matches_title_or_description_case_insensitively(self, api_client, owner, project, tasks):
        assert self.titles(api_client(owner).get(tasks_url(project), {'search': 'ALPH'})) == ['Alpha']
        assert self.titles(api_client(owner).get(tasks_url(project), {'search': 'Review'})) == ['Beta']

    def test_sort_by_priority_uses_declared_order(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'sortBy': 'priority', 'sortOrder': 'asc'})

        assert self.titles(res) == ['Beta', 'Gamma', 'Alpha']

    def test_sort_by_status_desc(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'sortBy': 'status'})

        assert self.titles(res) == ['Gamma', 'Beta', 'Alpha']

    def test_sort_by_due_date_asc_puts_missing_dates_last(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'sortBy': 'dueDate', 'sortOrder': 'asc'})

        assert self.titles(res) == ['Gamma', 'Alpha', 'Beta']

    def test_unknown_sort_field_falls_back_to_created_at(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'sortBy': 'title', 'sortOrder': 'asc'})

        assert self.titles(res) == ['Alpha', 'Beta', 'Gamma']

    def test_pagination(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'page': 2, 'pageSize': 2})

        assert self.titles(res) == ['Alpha']
        assert res.json()['page'] == 2

    def test_oversized_page_size_falls_back_to_task_default(self, api_client, owner, project, tasks):
        res = api_client(owner).get(tasks_url(project), {'pageSize': 500, 'page': 0})

        assert res.json()['pageSize'] == 10
        assert res.json()['page'] == 1

    def test_missing_project_is_404(self, api_client, owner):
        assert api_client(owner).get('/api/projects/9999/tasks').status_code == 404
