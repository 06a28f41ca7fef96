"""
Project management routes.
"""

import logging

from flask import Blueprint, abort, flash, jsonify, redirect, request, url_for

from app.domain.models import Project, ProjectStatus
from app.extensions import get_repositories
from app.forms import ProjectForm
from app.rendering import render_page, wants_json

logger = logging.getLogger(__name__)

project_bp = Blueprint('projects', __name__)


def _get_project_or_404(project_id):
    project = get_repositories().projects.get_by_id(project_id)
    if project is None:
        abort(404, description=f"Project {project_id} not found")
    return project


def _form_for(project):
    return ProjectForm(data={
        'name': project.name,
        'description': project.description,
        'location': project.location,
        'status': project.status.value,
        'hours_worked': project.hours_worked,
        'people_helped': project.people_helped,
        'start_date': project.start_date,
        'end_date': project.end_date,
    })


@project_bp.route('/', methods=['GET'])
def list_projects():
    """Display projects, optionally filtered by status."""
    status = request.args.get('status')
    query = None
    if status:
        try:
            query = {'status': ProjectStatus(status).value}
        except ValueError:
            abort(400, description=f"Unknown project status '{status}'")
    projects = list(get_repositories().projects.find(query))
    if wants_json():
        return jsonify([p.to_dict() for p in projects])
    return render_page('projects/list.html', title='Projects', projects=projects,
                       statuses=[s.value for s in ProjectStatus], current_status=status)


@project_bp.route('/new', methods=['GET'])
def new_project():
    return render_page('projects/form.html', title='Add Project', form=ProjectForm(), project=None)


@project_bp.route('/', methods=['POST'])
def create_project():
    form = ProjectForm()
    if not form.validate_on_submit():
        if wants_json():
            return jsonify({'errors': form.errors}), 400
        return render_page('projects/form.html', title='Add Project', status=400, form=form, project=None)

    project = get_repositories().projects.create(Project(**form.entity_kwargs()))
    logger.info(f"Project {project.id} created (status={project.status.value})")
    if wants_json():
        return jsonify(project.to_dict()), 201
    flash(f'Project "{project.name}" created.', 'success')
    return redirect(url_for('projects.show_project', project_id=project.id))


@project_bp.route('/<project_id>', methods=['GET'])
def show_project(project_id):
    project = _get_project_or_404(project_id)
    if wants_json():
        return jsonify(project.to_dict())
    return render_page('projects/detail.html', title=project.name, project=project)


@project_bp.route('/<project_id>/edit', methods=['GET'])
def edit_project(project_id):
    project = _get_project_or_404(project_id)
    return render_page('projects/form.html', title=f'Edit {project.name}', form=_form_for(project), project=project)


@project_bp.route('/<project_id>', methods=['POST', 'PUT'])
@project_bp.route('/<project_id>/edit', methods=['POST'])
def update_project(project_id):
    project = _get_project_or_404(project_id)
    form = ProjectForm()
    if not form.validate_on_submit():
        if wants_json():
            return jsonify({'errors': form.errors}), 400
        return render_page('projects/form.html', title=f'Edit {project.name}', status=400, form=form, project=project)

    fields = Project(**form.entity_kwargs()).to_document()
    fields.pop('createdAt')
    updated = get_repositories().projects.update(project_id, fields)
    if updated is None:
        abort(404, description=f"Project {project_id} not found")
    logger.info(f"Project {project_id} updated")
    if wants_json():
        return jsonify(updated.to_dict())
    flash('Project updated.', 'success')
    return redirect(url_for('projects.show_project', project_id=project_id))


@project_bp.route('/<project_id>/delete', methods=['POST'])
@project_bp.route('/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    if not get_repositories().projects.delete(project_id):
        abort(404, description=f"Project {project_id} not found")
    logger.info(f"Project {project_id} deleted")
    if wants_json():
        return '', 204
    flash('Project deleted.', 'success')
    return redirect(url_for('projects.list_projects'))
