from unittest import mock

import pytest
from django.db import DatabaseError

from project.models import ActivityAction, Project, ProjectActivityLog
from task.models import Task

pytestmark = pytest.mark.django_db


def test_create_project_logs_exactly_one_entry(api_client, owner):
    res = api_client(owner).post('/api/projects', {'name': 'Launch'}, format='json')

    assert res.status_code == 201
    project_id = res.json()['id']
    assert res.json()['owner_id'] == owner.id

    entries = ProjectActivityLog.objects.filter(action=ActivityAction.PROJECT_CREATED)
    assert entries.count() == 1
    assert entries.get().project_id == project_id


def test_created_project_activity_is_immediately_visible(api_client, owner):
    client = api_client(owner)
    project_id = client.post('/api/projects', {'name': 'Launch'}, format='json').json()['id']

    res = client.get(f'/api/projects/{project_id}/activity')

    assert res.status_code == 200
    body = res.json()
    assert body['total'] == 1
    assert [item['message'] for item in body['items']] == ['Project "Launch" created']


def test_create_with_description_adds_summary(api_client, owner):
    res = api_client(owner).post('/api/projects', {'name': 'Launch', 'description': 'Go live'}, format='json')

    assert res.status_code == 201
    assert ProjectActivityLog.objects.get().message == 'Project "Launch" created (Description: Go live)'


def test_create_validation_reports_fields(api_client, owner):
    res = api_client(owner).post('/api/projects', {'name': '', 'description': 'x' * 1001}, format='json')

    assert res.status_code == 400
    details = res.json()['details']
    assert details['name'] == ['Project name is required']
    assert details['description'] == ['Description too long']
    assert not ProjectActivityLog.objects.exists()


def test_name_longer_than_255_is_rejected(api_client, owner):
    res = api_client(owner).post('/api/projects', {'name': 'n' * 256}, format='json')

    assert res.status_code == 400
    assert res.json()['details']['name'] == ['Name too long']


def test_unauthenticated_requests_get_401(api_client, project):
    client = api_client()

    assert client.get('/api/projects').status_code == 401
    assert client.post('/api/projects', {'name': 'x'}, format='json').status_code == 401
    assert client.patch(f'/api/projects/{project.pk}', {'name': 'x'}, format='json').status_code == 401
    assert client.delete(f'/api/projects/{project.pk}').status_code == 401


def test_read_only_user_cannot_write_but_can_read(api_client, reader, project):
    client = api_client(reader)

    assert client.post('/api/projects', {'name': 'Mine'}, format='json').status_code == 403
    assert client.patch(f'/api/projects/{project.pk}', {'name': 'x'}, format='json').status_code == 403
    assert client.delete(f'/api/projects/{project.pk}').status_code == 403

    assert client.get('/api/projects').status_code == 200
    assert client.get(f'/api/projects/{project.pk}').status_code == 200
    assert client.get(f'/api/projects/{project.pk}/activity').status_code == 200
    assert Project.objects.filter(pk=project.pk, name='Launch').exists()


def test_read_only_owner_still_cannot_write(api_client, reader):
    project = Project.objects.create(name='Reader owned', owner=reader)

    res = api_client(reader).patch(f'/api/projects/{project.pk}', {'name': 'x'}, format='json')

    assert res.status_code == 403


def test_non_owner_is_forbidden(api_client, other_editor, project):
    client = api_client(other_editor)

    res = client.patch(f'/api/projects/{project.pk}', {'name': 'Hijacked'}, format='json')
    assert res.status_code == 403
    assert res.json() == {'error': 'Forbidden: only the project owner can edit this project'}

    assert client.delete(f'/api/projects/{project.pk}').status_code == 403
    assert Project.objects.filter(pk=project.pk).exists()
    assert not ProjectActivityLog.objects.exists()


def test_patch_missing_project_is_404(api_client, owner):
    res = api_client(owner).patch('/api/projects/9999', {'name': 'x'}, format='json')

    assert res.status_code == 404


def test_patch_logs_rename(api_client, owner, project):
    res = api_client(owner).patch(f'/api/projects/{project.pk}', {'name': 'Liftoff'}, format='json')

    assert res.status_code == 200
    assert res.json()['name'] == 'Liftoff'
    entry = ProjectActivityLog.objects.get(action=ActivityAction.PROJECT_UPDATED)
    assert entry.message == 'Project "Liftoff" updated - Name: "Launch" → "Liftoff"'


def test_project_update_without_changes_still_logs(api_client, owner, project):
    res = api_client(owner).patch(f'/api/projects/{project.pk}', {'name': 'Launch'}, format='json')

    assert res.status_code == 200
    entry = ProjectActivityLog.objects.get(action=ActivityAction.PROJECT_UPDATED)
    assert entry.message == 'Project "Launch" updated'


def test_clearing_description_renders_empty(api_client, owner, project):
    api_client(owner).patch(f'/api/projects/{project.pk}', {'description': ''}, format='json')

    entry = ProjectActivityLog.objects.get(action=ActivityAction.PROJECT_UPDATED)
    assert entry.message == 'Project "Launch" updated - Description: "Ship the first release" → "(empty)"'
    project.refresh_from_db()
    assert project.description is None


def test_delete_cascades_tasks(api_client, owner, project, task):
    res = api_client(owner).delete(f'/api/projects/{project.pk}')

    assert res.status_code == 200
    assert res.json() == {'message': 'Project deleted'}
    assert not Project.objects.filter(pk=project.pk).exists()
    assert not Task.objects.filter(pk=task.pk).exists()
    # the deletion entry goes with the project it belongs to
    assert not ProjectActivityLog.objects.filter(action=ActivityAction.PROJECT_DELETED).exists()


def test_delete_log_is_visible_when_delete_fails(api_client, owner, project):
    with mock.patch.object(Project, 'delete', side_effect=DatabaseError('fk violation')):
        res = api_client(owner).delete(f'/api/projects/{project.pk}')

    assert res.status_code == 500
    assert res.json() == {'error': 'Internal server error.'}
    entry = ProjectActivityLog.objects.get(action=ActivityAction.PROJECT_DELETED)
    assert entry.message == 'Project "Launch" deleted (Description: Ship the first release)'

    listed = api_client(owner).get(f'/api/projects/{project.pk}/activity').json()
    assert listed['items'][0]['action'] == 'PROJECT_DELETED'


def test_delete_succeeds_when_deletion_log_fails(api_client, owner, project):
    with mock.patch('project.activity_store.append', side_effect=DatabaseError('log table gone')):
        res = api_client(owner).delete(f'/api/projects/{project.pk}')

    assert res.status_code == 200
    assert not Project.objects.filter(pk=project.pk).exists()


def test_create_log_failure_surfaces_500_after_commit(api_client, owner):
    with mock.patch('project.activity_store.append', side_effect=DatabaseError('log table gone')):
        res = api_client(owner).post('/api/projects', {'name': 'Launch'}, format='json')

    assert res.status_code == 500
    assert Project.objects.filter(name='Launch').exists()


def test_list_returns_every_project_with_task_counts(api_client, owner, other_editor, project, task):
    Project.objects.create(name='Someone else', owner=other_editor)

    res = api_client(owner).get('/api/projects')

    assert res.status_code == 200
    body = res.json()
    assert [p['name'] for p in body] == ['Someone else', 'Launch']
    assert {p['name']: p['task_count'] for p in body} == {'Someone else': 0, 'Launch': 1}


def test_any_user_can_read_another_users_project(api_client, other_editor, project):
    res = api_client(other_editor).get(f'/api/projects/{project.pk}')

    assert res.status_code == 200
    assert res.json()['name'] == 'Launch'


def test_get_missing_project_is_404(api_client, owner):
    res = api_client(owner).get('/api/projects/9999')

    assert res.status_code == 404
    assert 'error' in res.json()
