"""End-to-end tests for the HTTP surface using the Flask test client."""
import logging
import re

import pytest

from config import TestingConfig
from app import create_app
from app.domain.models import TaskStatus, ProjectStatus
from app.errors import RecordNotFoundError

JSON = {'Accept': 'application/json'}


def _metric(html, element_id):
    match = re.search(rf'id="{element_id}">(\d+)<', html)
    assert match, f"metric {element_id} not rendered"
    return int(match.group(1))


# -- view routes -----------------------------------------------------------

def test_home_page(client):
    response = client.get('/')
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert 'Welcome to Volunteer Engagement App!' in body
    assert '<title>Home' in body


def test_about_page_is_stable(client):
    first = client.get('/about')
    second = client.get('/about')
    assert first.status_code == 200
    assert 'Learn about our volunteer management platform' in first.get_data(as_text=True)
    assert first.get_data() == second.get_data()


def test_impact_page_reports_rollups_before_and_after_job(app, client, make_project):
    make_project('Water', status=ProjectStatus.ACTIVE, hours_worked=10, people_helped=5)
    make_project('School', status=ProjectStatus.COMPLETED, hours_worked=20, people_helped=15)

    html = client.get('/impact').get_data(as_text=True)
    assert (_metric(html, 'total-hours'), _metric(html, 'total-people-helped')) == (30, 20)

    app.extensions['metrics_job'].run()

    html = client.get('/impact').get_data(as_text=True)
    assert (_metric(html, 'total-hours'), _metric(html, 'total-people-helped')) == (36, 30)


def test_impact_page_lists_completed_tasks(client, make_volunteer, make_task):
    ada = make_volunteer('Ada Lovelace')
    make_task('Deliver meals', status=TaskStatus.COMPLETED, assigned_to=[ada.id])
    make_task('Paint fence', status=TaskStatus.PENDING, assigned_to=[ada.id])

    response = client.get('/impact')

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert _metric(html, 'volunteers-count') == 1
    assert 'Deliver meals' in html
    assert 'Ada Lovelace' in html
    assert 'Paint fence' not in html


def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'healthy', 'database': 'connected'}


# -- error boundary --------------------------------------------------------

def test_unknown_path_is_not_found(client):
    response = client.get('/no-such-page')
    assert response.status_code == 404
    assert 'Not Found' in response.get_data(as_text=True)


def test_unknown_path_as_json(client):
    response = client.get('/no-such-page', headers=JSON)
    assert response.status_code == 404
    assert response.get_json()['status'] == 404


@pytest.mark.parametrize('path', ['/volunteers/nope', '/tasks/123', '/projects/5f1d7f9a2b3c4d5e6f708192'])
def test_missing_records_are_not_found(client, path):
    assert client.get(path).status_code == 404


class BrokenAggregator:
    def build_impact_report(self):
        raise RuntimeError('database exploded')


def test_server_error_hides_details_outside_development(app, client):
    app.extensions['impact_aggregator'] = BrokenAggregator()

    response = client.get('/impact')

    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert 'Internal Server Error' in body
    assert 'database exploded' not in body
    assert 'Traceback' not in body


def test_server_error_shows_traceback_in_development(mongo_client):
    class DevelopmentConfig(TestingConfig):
        APP_ENV = 'development'

    app = create_app(DevelopmentConfig, mongo_client=mongo_client)
    app.extensions['impact_aggregator'] = BrokenAggregator()

    response = app.test_client().get('/impact')

    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert 'database exploded' in body
    assert 'Traceback' in body

    payload = app.test_client().get('/impact', headers=JSON).get_json()
    assert payload['detail']['type'] == 'RuntimeError'


def test_error_status_taken_from_exception(app, client):
    class MissingAggregator:
        def build_impact_report(self):
            raise RecordNotFoundError('Report', 'latest')

    app.extensions['impact_aggregator'] = MissingAggregator()

    response = client.get('/impact', headers=JSON)

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Report latest not found', 'status': 404}


# -- volunteers ------------------------------------------------------------

def test_create_volunteer_from_form(client, repositories):
    response = client.post('/volunteers/', data={
        'name': 'Ada Lovelace', 'email': 'Ada@HelpingHands.org', 'skills': 'cooking, driving',
    })

    assert response.status_code == 302
    volunteer = next(repositories.volunteers.find())
    assert response.headers['Location'].endswith(f'/volunteers/{volunteer.id}')
    assert volunteer.email == 'ada@helpinghands.org'
    assert volunteer.skills == ['cooking', 'driving']


def test_create_volunteer_from_json(client):
    response = client.post('/volunteers/', json={
        'name': 'Grace Hopper', 'email': 'grace@helpinghands.org', 'skills': ['teaching'],
    })

    assert response.status_code == 201
    data = response.get_json()
    assert data['id']
    assert data['skills'] == ['teaching']


def test_create_volunteer_requires_valid_email(client, repositories):
    response = client.post('/volunteers/', json={'name': 'Nobody', 'email': 'not-an-email'})
    assert response.status_code == 400
    assert 'email' in response.get_json()['errors']

    response = client.post('/volunteers/', data={'name': '', 'email': ''})
    assert response.status_code == 400
    assert 'Name is required' in response.get_data(as_text=True)
    assert repositories.volunteers.count() == 0


def test_list_and_show_volunteer(client, make_volunteer, make_task):
    ada = make_volunteer('Ada Lovelace', skills=['nursing'])
    make_task('Staff clinic', assigned_to=[ada.id])

    listing = client.get('/volunteers/', headers=JSON).get_json()
    assert [v['name'] for v in listing] == ['Ada Lovelace']

    detail = client.get(f'/volunteers/{ada.id}').get_data(as_text=True)
    assert 'Ada Lovelace' in detail
    assert 'Staff clinic' in detail


def test_edit_and_update_volunteer(client, repositories, make_volunteer):
    ada = make_volunteer('Ada Lovelace')

    form = client.get(f'/volunteers/{ada.id}/edit')
    assert form.status_code == 200
    assert 'ada@helpinghands.org' in form.get_data(as_text=True)

    response = client.put(f'/volunteers/{ada.id}', json={
        'name': 'Ada King', 'email': 'ada@helpinghands.org', 'phone': '555-0100',
    })

    assert response.status_code == 200
    assert response.get_json()['name'] == 'Ada King'
    assert repositories.volunteers.get_by_id(ada.id).phone == '555-0100'


def test_delete_volunteer(client, repositories, make_volunteer):
    ada = make_volunteer('Ada Lovelace')
    grace = make_volunteer('Grace Hopper')

    assert client.delete(f'/volunteers/{ada.id}', headers=JSON).status_code == 204
    response = client.post(f'/volunteers/{grace.id}/delete')
    assert response.status_code == 302
    assert repositories.volunteers.count() == 0
    assert client.delete(f'/volunteers/{ada.id}', headers=JSON).status_code == 404


# -- tasks -----------------------------------------------------------------

def test_create_task_with_assignees(client, repositories, make_volunteer):
    ada = make_volunteer('Ada Lovelace')
    grace = make_volunteer('Grace Hopper')

    response = client.post('/tasks/', data={
        'title': 'Deliver meals', 'status': 'In Progress', 'assigned_to': [ada.id, grace.id],
        'due_date': '2026-11-02',
    })

    assert response.status_code == 302
    task = next(repositories.tasks.find())
    assert task.status == TaskStatus.IN_PROGRESS
    assert set(task.assigned_to) == {ada.id, grace.id}

    detail = client.get(f'/tasks/{task.id}').get_data(as_text=True)
    assert 'grace@helpinghands.org' in detail


def test_create_task_rejects_unknown_volunteer(client, repositories):
    response = client.post('/tasks/', json={
        'title': 'Ghost work', 'assigned_to': ['5f1d7f9a2b3c4d5e6f708192'],
    })
    assert response.status_code == 400
    assert 'assigned_to' in response.get_json()['errors']
    assert repositories.tasks.count() == 0


def test_create_task_requires_title(client):
    response = client.post('/tasks/', json={'title': ''})
    assert response.status_code == 400
    assert 'title' in response.get_json()['errors']


def test_task_json_expands_assignees(client, make_volunteer, make_task):
    ada = make_volunteer('Ada Lovelace')
    task = make_task('Sort donations', assigned_to=[ada.id])

    data = client.get(f'/tasks/{task.id}', headers=JSON).get_json()

    assert data['assignedTo'][0]['name'] == 'Ada Lovelace'


def test_list_tasks_filtered_by_status(client, make_task):
    make_task('Done', status=TaskStatus.COMPLETED)
    make_task('Todo')

    data = client.get('/tasks/?status=Completed', headers=JSON).get_json()

    assert [t['title'] for t in data] == ['Done']
    assert client.get('/tasks/?status=Bogus').status_code == 400


def test_update_task_status(client, repositories, make_task):
    task = make_task('Paint fence')

    response = client.post(f'/tasks/{task.id}/edit', data={'title': 'Paint fence', 'status': 'Completed'})

    assert response.status_code == 302
    assert repositories.tasks.get_by_id(task.id).status == TaskStatus.COMPLETED


def test_delete_task(client, repositories, make_task):
    task = make_task()
    assert client.delete(f'/tasks/{task.id}', headers=JSON).status_code == 204
    assert repositories.tasks.count() == 0


# -- projects --------------------------------------------------------------

def test_create_project_from_form(client, repositories):
    response = client.post('/projects/', data={
        'name': 'Clean Water', 'status': 'active', 'hours_worked': '12', 'people_helped': '40',
        'location': 'Nairobi', 'start_date': '2026-03-01',
    })

    assert response.status_code == 302
    project = next(repositories.projects.find())
    assert project.status == ProjectStatus.ACTIVE
    assert (project.hours_worked, project.people_helped) == (12, 40)


def test_create_project_defaults_metrics_to_zero(client):
    response = client.post('/projects/', json={'name': 'Library'})

    assert response.status_code == 201
    data = response.get_json()
    assert (data['hoursWorked'], data['peopleHelped']) == (0, 0)
    assert data['status'] == 'planning'


@pytest.mark.parametrize('payload, field', [
    ({'name': 'Bad', 'hours_worked': -1}, 'hours_worked'),
    ({'name': 'Bad', 'status': 'cancelled'}, 'status'),
    ({'name': 'Bad', 'start_date': '2026-05-01', 'end_date': '2026-04-01'}, 'end_date'),
    ({'name': ''}, 'name'),
])
def test_create_project_validation(client, payload, field):
    response = client.post('/projects/', json=payload)
    assert response.status_code == 400
    assert field in response.get_json()['errors']


def test_update_and_delete_project(client, repositories, make_project):
    project = make_project('Food Bank')

    response = client.put(f'/projects/{project.id}', json={
        'name': 'Food Bank', 'status': 'on-hold', 'hours_worked': 3, 'people_helped': 7,
    })
    assert response.status_code == 200
    assert response.get_json()['status'] == 'on-hold'

    assert client.post(f'/projects/{project.id}/delete').status_code == 302
    assert repositories.projects.count() == 0


def test_list_projects(client, make_project):
    make_project('Food Bank', status=ProjectStatus.ACTIVE)
    make_project('Shelter', status=ProjectStatus.ON_HOLD)

    html = client.get('/projects/').get_data(as_text=True)
    assert 'Food Bank' in html and 'Shelter' in html

    data = client.get('/projects/?status=on-hold', headers=JSON).get_json()
    assert [p['name'] for p in data] == ['Shelter']


def test_request_log_line(mongo_client, caplog):
    class LoggedConfig(TestingConfig):
        REQUEST_LOG = True

    app = create_app(LoggedConfig, mongo_client=mongo_client)
    with caplog.at_level(logging.INFO, logger='app.requests'):
        app.test_client().get('/about')

    assert re.search(r'GET /about 200 \d+\.\dms', caplog.text)


def test_static_assets_are_served(client):
    response = client.get('/static/css/style.css')
    assert response.status_code == 200
    assert '.metric' in response.get_data(as_text=True)


# -- JSON bodies -----------------------------------------------------------

def test_json_null_fields_count_as_absent(client):
    project = client.post('/projects/', json={'name': 'Library', 'hours_worked': None, 'end_date': None})
    assert project.status_code == 201
    assert project.get_json()['hoursWorked'] == 0

    task = client.post('/tasks/', json={'title': 'Shelve books', 'due_date': None, 'assigned_to': None})
    assert task.status_code == 201
    assert task.get_json()['dueDate'] is None

    volunteer = client.post('/volunteers/', json={
        'name': 'Alan Turing', 'email': 'alan@helpinghands.org', 'phone': None, 'skills': None,
    })
    assert volunteer.status_code == 201
    assert volunteer.get_json()['skills'] == []


def test_json_null_required_field_is_invalid(client):
    response = client.post('/tasks/', json={'title': None})
    assert response.status_code == 400
    assert 'title' in response.get_json()['errors']


def test_json_body_must_be_an_object(client):
    response = client.post('/projects/', json=['Library'])
    assert response.status_code == 400
