"""
Routes package initialization.
Registers the view routes and all resource blueprints for the application.
"""

import logging
from flask import Blueprint

from app.extensions import get_impact_aggregator
from app.rendering import render_page

logger = logging.getLogger(__name__)

# Import all blueprint modules
from .volunteer_routes import volunteer_bp
from .task_routes import task_bp
from .project_routes import project_bp
from .misc_routes import misc_bp

# Create a main blueprint for the top-level view routes
main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return render_page('index.html', title='Home', message='Welcome to Volunteer Engagement App!')


@main_bp.route('/about')
def about():
    return render_page('about.html', title='About Us',
                       message='Learn about our volunteer management platform')


@main_bp.route('/impact')
def impact():
    """Impact report: volunteer count, completed tasks and project rollups."""
    report = get_impact_aggregator().build_impact_report()
    return render_page('impact.html', title='Impact Reports', **report.to_context())


def register_blueprints(app):
    """Register all blueprints with the Flask application."""

    # View routes first, then the mounted resource modules
    app.register_blueprint(main_bp)
    app.register_blueprint(misc_bp)

    app.register_blueprint(volunteer_bp, url_prefix='/volunteers')
    app.register_blueprint(task_bp, url_prefix='/tasks')
    app.register_blueprint(project_bp, url_prefix='/projects')

    logger.debug("All blueprints registered successfully")


__all__ = ['main_bp', 'volunteer_bp', 'task_bp', 'project_bp', 'misc_bp', 'register_blueprints']
