"""
Template context processors and filters for making common values available in templates.
"""

from datetime import datetime


STATUS_BADGES = {
    'pending': 'secondary',
    'in progress': 'info',
    'completed': 'success',
    'planning': 'secondary',
    'active': 'primary',
    'on-hold': 'warning',
}


def inject_site_config():
    """Make site configuration available in all templates."""
    from flask import current_app
    return {
        'site_name': current_app.config.get('SITE_NAME', 'NGO Volunteer Management'),
        'app_env': current_app.config.get('APP_ENV', 'production'),
    }


def inject_current_year():
    return {'current_year': datetime.now().year}


def status_badge(status):
    """Map a task/project status (enum or string) to a badge style."""
    value = getattr(status, 'value', status) or ''
    return STATUS_BADGES.get(str(value).lower(), 'light')


def format_date(value, fmt='%b %d, %Y'):
    if not value:
        return ''
    if hasattr(value, 'strftime'):
        return value.strftime(fmt)
    return str(value)


def register_context_processors(app):
    """Register all context processors and filters with the Flask app."""
    app.context_processor(inject_site_config)
    app.context_processor(inject_current_year)
    app.add_template_filter(status_badge, 'status_badge')
    app.add_template_filter(format_date, 'format_date')
