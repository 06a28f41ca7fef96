"""
Task management routes.
Tasks reference volunteers through ``assignedTo``; detail views expand those references.
"""

import logging

from flask import Blueprint, abort, flash, jsonify, redirect, request, url_for

from app.domain.models import Task, TaskStatus
from app.extensions import get_repositories
from app.forms import TaskForm
from app.rendering import render_page, wants_json

logger = logging.getLogger(__name__)

task_bp = Blueprint('tasks', __name__)


def _task_form(task=None):
    """Build a TaskForm with volunteer choices; pre-filled from ``task`` on GET."""
    data = None
    if task is not None:
        data = {
            'title': task.title,
            'description': task.description,
            'status': task.status.value,
            'assigned_to': list(task.assigned_to),
            'due_date': task.due_date,
        }
    form = TaskForm(data=data)
    form.set_volunteer_choices(get_repositories().volunteers.find())
    return form


def _get_task_or_404(task_id, expand=False):
    task = get_repositories().tasks.get_by_id(task_id, expand=expand)
    if task is None:
        abort(404, description=f"Task {task_id} not found")
    return task


def _status_filter():
    status = request.args.get('status')
    if not status:
        return None, None
    try:
        return {'status': TaskStatus(status).value}, status
    except ValueError:
        abort(400, description=f"Unknown task status '{status}'")


@task_bp.route('/', methods=['GET'])
def list_tasks():
    """Display tasks, optionally filtered by status."""
    query, status = _status_filter()
    tasks = list(get_repositories().tasks.find_with_assignees(query))
    if wants_json():
        return jsonify([t.to_dict() for t in tasks])
    return render_page('tasks/list.html', title='Tasks', tasks=tasks,
                       statuses=[s.value for s in TaskStatus], current_status=status)


@task_bp.route('/new', methods=['GET'])
def new_task():
    return render_page('tasks/form.html', title='Add Task', form=_task_form(), task=None)


@task_bp.route('/', methods=['POST'])
def create_task():
    form = _task_form()
    if not form.validate_on_submit():
        if wants_json():
            return jsonify({'errors': form.errors}), 400
        return render_page('tasks/form.html', title='Add Task', status=400, form=form, task=None)

    task = get_repositories().tasks.create(Task(**form.entity_kwargs()))
    logger.info(f"Task {task.id} created with {len(task.assigned_to)} assignee(s)")
    if wants_json():
        return jsonify(task.to_dict()), 201
    flash(f'Task "{task.title}" created.', 'success')
    return redirect(url_for('tasks.show_task', task_id=task.id))


@task_bp.route('/<task_id>', methods=['GET'])
def show_task(task_id):
    task = _get_task_or_404(task_id, expand=True)
    if wants_json():
        return jsonify(task.to_dict())
    return render_page('tasks/detail.html', title=task.title, task=task)


@task_bp.route('/<task_id>/edit', methods=['GET'])
def edit_task(task_id):
    task = _get_task_or_404(task_id)
    return render_page('tasks/form.html', title=f'Edit {task.title}', form=_task_form(task), task=task)


@task_bp.route('/<task_id>', methods=['POST', 'PUT'])
@task_bp.route('/<task_id>/edit', methods=['POST'])
def update_task(task_id):
    task = _get_task_or_404(task_id)
    form = _task_form()
    if not form.validate_on_submit():
        if wants_json():
            return jsonify({'errors': form.errors}), 400
        return render_page('tasks/form.html', title=f'Edit {task.title}', status=400, form=form, task=task)

    fields = Task(**form.entity_kwargs()).to_document()
    fields.pop('createdAt')
    updated = get_repositories().tasks.update(task_id, fields)
    if updated is None:
        abort(404, description=f"Task {task_id} not found")
    logger.info(f"Task {task_id} updated (status={updated.status.value})")
    if wants_json():
        return jsonify(updated.to_dict())
    flash('Task updated.', 'success')
    return redirect(url_for('tasks.show_task', task_id=task_id))


@task_bp.route('/<task_id>/delete', methods=['POST'])
@task_bp.route('/<task_id>', methods=['DELETE'])
def delete_task(task_id):
    if not get_repositories().tasks.delete(task_id):
        abort(404, description=f"Task {task_id} not found")
    logger.info(f"Task {task_id} deleted")
    if wants_json():
        return '', 204
    flash('Task deleted.', 'success')
    return redirect(url_for('tasks.list_tasks'))
