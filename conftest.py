import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from project.models import Project
from task.models import Task
from user.models import Role, UserProfile


@pytest.fixture(autouse=True)
def fast_passwords(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture
def make_user(db):
    def _make(email, role=Role.EDITOR, password='secret123'):
        user = User.objects.create_user(username=email, email=email, password=password)
        UserProfile.objects.create(user=user, role=role)
        return user
    return _make


@pytest.fixture
def owner(make_user):
    return make_user('owner@example.com')


@pytest.fixture
def other_editor(make_user):
    return make_user('other@example.com')


@pytest.fixture
def reader(make_user):
    return make_user('reader@example.com', role=Role.READ_ONLY)


@pytest.fixture
def api_client():
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return _client


@pytest.fixture
def project(owner):
    return Project.objects.create(name='Launch', description='Ship the first release', owner=owner)


@pytest.fixture
def task(project):
    return Task.objects.create(project=project, title='Write docs', description='short')
