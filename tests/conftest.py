"""Shared fixtures: an app wired to an in-memory MongoDB client."""
import os

# config.Config refuses to load without a key outside development
os.environ.setdefault('SECRET_KEY', 'testing-secret-key')

import mongomock
import pytest

from config import TestingConfig
from app import create_app
from app.domain.models import Volunteer, Task, TaskStatus, Project, ProjectStatus


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def app(mongo_client):
    app = create_app(TestingConfig, mongo_client=mongo_client)
    yield app
    app.extensions['store'].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repositories(app):
    return app.extensions['repositories']


@pytest.fixture
def make_volunteer(repositories):
    def _make(name='Ada Lovelace', email=None, **kwargs):
        email = email or f"{name.split()[0].lower()}@helpinghands.org"
        return repositories.volunteers.create(Volunteer(name=name, email=email, **kwargs))
    return _make


@pytest.fixture
def make_task(repositories):
    def _make(title='Sort donations', status=TaskStatus.PENDING, assigned_to=None, **kwargs):
        return repositories.tasks.create(
            Task(title=title, status=status, assigned_to=assigned_to or [], **kwargs)
        )
    return _make


@pytest.fixture
def make_project(repositories):
    def _make(name='Food Bank', status=ProjectStatus.PLANNING, hours_worked=0, people_helped=0, **kwargs):
        return repositories.projects.create(
            Project(name=name, status=status, hours_worked=hours_worked,
                    people_helped=people_helped, **kwargs)
        )
    return _make
