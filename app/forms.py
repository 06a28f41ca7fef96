from flask import abort, request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import (
    Field, StringField, TextAreaField, IntegerField, SelectField, SelectMultipleField,
    DateField, SubmitField,
)
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional, ValidationError
from wtforms.widgets import TextInput

from .domain.models import TaskStatus, ProjectStatus


class CommaListField(Field):
    """Text input holding a comma separated list; repeated values (JSON arrays) are accepted too."""
    widget = TextInput()

    def _value(self):
        return ', '.join(self.data) if self.data else ''

    def process_formdata(self, valuelist):
        items = []
        for value in valuelist:
            items.extend(part.strip() for part in str(value).split(','))
        self.data = [item for item in items if item]

    def process_data(self, value):
        self.data = list(value) if value else []


class RecordForm(FlaskForm):
    """Base form; JSON bodies are read like url-encoded ones.

    JSON nulls are treated as absent fields and scalar values as their text.
    """

    class Meta(FlaskForm.Meta):
        def wrap_formdata(self, form, formdata):
            if not (request.is_json and form.is_submitted()):
                return super().wrap_formdata(form, formdata)
            payload = request.get_json()
            if not isinstance(payload, dict):
                abort(400, description="JSON body must be an object")
            pairs = []
            for key, value in payload.items():
                values = value if isinstance(value, list) else [value]
                pairs.extend((key, str(v)) for v in values if v is not None)
            return ImmutableMultiDict(pairs)


class VolunteerForm(RecordForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required'), Length(max=120)])
    email = StringField('Email', validators=[DataRequired(message='Email is required'), Email()])
    phone = StringField('Phone', validators=[Optional(), Length(max=40)])
    skills = CommaListField('Skills')
    availability = StringField('Availability', validators=[Optional(), Length(max=120)])
    submit = SubmitField('Save Volunteer')

    def entity_kwargs(self):
        return {
            'name': self.name.data.strip(),
            'email': self.email.data.strip().lower(),
            'phone': self.phone.data or None,
            'skills': self.skills.data or [],
            'availability': self.availability.data or None,
        }


class TaskForm(RecordForm):
    title = StringField('Title', validators=[DataRequired(message='Title is required'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    status = SelectField('Status', choices=TaskStatus.choices(), default=TaskStatus.PENDING.value)
    assigned_to = SelectMultipleField('Assigned Volunteers', choices=[], validate_choice=True)
    due_date = DateField('Due Date', validators=[Optional()])
    submit = SubmitField('Save Task')

    def set_volunteer_choices(self, volunteers):
        self.assigned_to.choices = [(v.id, v.name) for v in volunteers]

    def entity_kwargs(self):
        return {
            'title': self.title.data.strip(),
            'description': self.description.data or None,
            'status': TaskStatus(self.status.data),
            'assigned_to': list(self.assigned_to.data or []),
            'due_date': self.due_date.data,
        }


class ProjectForm(RecordForm):
    name = StringField('Project Name', validators=[DataRequired(message='Project name is required'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    location = StringField('Location', validators=[Optional(), Length(max=200)])
    status = SelectField('Status', choices=ProjectStatus.choices(), default=ProjectStatus.PLANNING.value)
    hours_worked = IntegerField('Hours Worked', validators=[Optional(), NumberRange(min=0)], default=0)
    people_helped = IntegerField('People Helped', validators=[Optional(), NumberRange(min=0)], default=0)
    start_date = DateField('Start Date', validators=[Optional()])
    end_date = DateField('End Date', validators=[Optional()])
    submit = SubmitField('Save Project')

    def validate_end_date(self, field):
        if field.data and self.start_date.data and field.data < self.start_date.data:
            raise ValidationError('End date cannot be before the start date.')

    def entity_kwargs(self):
        return {
            'name': self.name.data.strip(),
            'description': self.description.data or None,
            'location': self.location.data or None,
            'status': ProjectStatus(self.status.data),
            'hours_worked': self.hours_worked.data or 0,
            'people_helped': self.people_helped.data or 0,
            'start_date': self.start_date.data,
            'end_date': self.end_date.data,
        }
