"""
Volunteer management routes.
Handles listing, creating, viewing, updating and deleting volunteers.
"""

import logging

from flask import Blueprint, abort, flash, jsonify, redirect, url_for

from app.domain.models import Volunteer
from app.extensions import get_repositories
from app.forms import VolunteerForm
from app.rendering import render_page, wants_json

logger = logging.getLogger(__name__)

volunteer_bp = Blueprint('volunteers', __name__)


def _get_volunteer_or_404(volunteer_id):
    volunteer = get_repositories().volunteers.get_by_id(volunteer_id)
    if volunteer is None:
        abort(404, description=f"Volunteer {volunteer_id} not found")
    return volunteer


def _invalid(form, template, status=400, **data):
    if wants_json():
        return jsonify({'errors': form.errors}), status
    return render_page(template, title=data.pop('title', 'Volunteer'), status=status, form=form, **data)


@volunteer_bp.route('/', methods=['GET'])
def list_volunteers():
    """Display all volunteers."""
    volunteers = list(get_repositories().volunteers.find())
    if wants_json():
        return jsonify([v.to_dict() for v in volunteers])
    return render_page('volunteers/list.html', title='Volunteers', volunteers=volunteers)


@volunteer_bp.route('/new', methods=['GET'])
def new_volunteer():
    return render_page('volunteers/form.html', title='Add Volunteer', form=VolunteerForm(), volunteer=None)


@volunteer_bp.route('/', methods=['POST'])
def create_volunteer():
    form = VolunteerForm()
    if not form.validate_on_submit():
        return _invalid(form, 'volunteers/form.html', title='Add Volunteer', volunteer=None)

    volunteer = get_repositories().volunteers.create(Volunteer(**form.entity_kwargs()))
    logger.info(f"Volunteer {volunteer.id} created")
    if wants_json():
        return jsonify(volunteer.to_dict()), 201
    flash(f'Volunteer {volunteer.name} added.', 'success')
    return redirect(url_for('volunteers.show_volunteer', volunteer_id=volunteer.id))


@volunteer_bp.route('/<volunteer_id>', methods=['GET'])
def show_volunteer(volunteer_id):
    volunteer = _get_volunteer_or_404(volunteer_id)
    if wants_json():
        return jsonify(volunteer.to_dict())
    tasks = list(get_repositories().tasks.find_assigned_to(volunteer.id))
    return render_page('volunteers/detail.html', title=volunteer.name, volunteer=volunteer, tasks=tasks)


@volunteer_bp.route('/<volunteer_id>/edit', methods=['GET'])
def edit_volunteer(volunteer_id):
    volunteer = _get_volunteer_or_404(volunteer_id)
    form = VolunteerForm(obj=volunteer)
    return render_page('volunteers/form.html', title=f'Edit {volunteer.name}', form=form, volunteer=volunteer)


@volunteer_bp.route('/<volunteer_id>', methods=['POST', 'PUT'])
@volunteer_bp.route('/<volunteer_id>/edit', methods=['POST'])
def update_volunteer(volunteer_id):
    volunteer = _get_volunteer_or_404(volunteer_id)
    form = VolunteerForm()
    if not form.validate_on_submit():
        return _invalid(form, 'volunteers/form.html', title=f'Edit {volunteer.name}', volunteer=volunteer)

    fields = Volunteer(**form.entity_kwargs()).to_document()
    fields.pop('createdAt')
    updated = get_repositories().volunteers.update(volunteer_id, fields)
    if updated is None:
        abort(404, description=f"Volunteer {volunteer_id} not found")
    logger.info(f"Volunteer {volunteer_id} updated")
    if wants_json():
        return jsonify(updated.to_dict())
    flash('Volunteer updated.', 'success')
    return redirect(url_for('volunteers.show_volunteer', volunteer_id=volunteer_id))


@volunteer_bp.route('/<volunteer_id>/delete', methods=['POST'])
@volunteer_bp.route('/<volunteer_id>', methods=['DELETE'])
def delete_volunteer(volunteer_id):
    # Tasks keep their reference; unresolved assignees are dropped when tasks are read.
    if not get_repositories().volunteers.delete(volunteer_id):
        abort(404, description=f"Volunteer {volunteer_id} not found")
    logger.info(f"Volunteer {volunteer_id} deleted")
    if wants_json():
        return '', 204
    flash('Volunteer deleted.', 'success')
    return redirect(url_for('volunteers.list_volunteers'))