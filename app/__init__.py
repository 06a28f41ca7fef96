"""
Flask application factory for the NGO volunteer management app.

Request pipeline, in order: request log (WSGI wrapper) -> body parsing (JSON and
form bodies via Flask/WTForms) -> cookies -> static files -> page context ->
view routes -> resource blueprints -> not-found fallback -> error boundary.
"""

import atexit
import logging
import time
import traceback

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect
from werkzeug.exceptions import HTTPException

from config import Config

logger = logging.getLogger(__name__)
request_logger = logging.getLogger('app.requests')

csrf = CSRFProtect()

_LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def _configure_logging(app):
    """Configure Python logging level from LOG_LEVEL (default INFO)."""
    log_level_name = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(log_level)
    app.logger.setLevel(log_level)
    # Driver internals are noisy at INFO
    logging.getLogger('pymongo').setLevel(logging.WARNING)


def _wsgi_log_wrapper(app_wsgi):
    """Log one line per request: method, path, status and duration."""
    def _wrapped(environ, start_response):
        started = time.perf_counter()
        _method = environ.get('REQUEST_METHOD', '-')
        _path = environ.get('PATH_INFO', '-')

        def _sr(status, headers, exc_info=None):
            elapsed_ms = (time.perf_counter() - started) * 1000
            request_logger.info(f"{_method} {_path} {status.split(' ', 1)[0]} {elapsed_ms:.1f}ms")
            return start_response(status, headers, exc_info)
        return app_wsgi(environ, _sr)
    return _wrapped


def _error_status(error) -> int:
    if isinstance(error, HTTPException):
        return error.code or 500
    for attr in ('code', 'status'):
        value = getattr(error, attr, None)
        if isinstance(value, int) and 400 <= value < 600:
            return value
    return 500


def register_error_handlers(app):
    """Single error boundary translating any error into an error page."""
    from .rendering import render_page, wants_json

    @app.errorhandler(Exception)
    def handle_error(error):
        status = _error_status(error)
        development = app.config.get('APP_ENV') == 'development'

        if isinstance(error, HTTPException):
            message = error.description or error.name
            title = error.name
        elif status < 500 or development:
            message = str(error) or type(error).__name__
            title = 'Error'
        else:
            message = 'Internal Server Error'
            title = 'Error'

        if status >= 500:
            app.logger.error(f"Unhandled error ({status}): {error}", exc_info=error)
        else:
            app.logger.info(f"Request failed ({status}): {message}")

        detail = {}
        if development:
            detail = {
                'type': type(error).__name__,
                'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
            }

        if wants_json():
            payload = {'error': message, 'status': status}
            if detail:
                payload['detail'] = detail
            return jsonify(payload), status
        return render_page('error.html', title=title, status=status,
                           message=message, status_code=status, error=detail)


def create_app(config_object=None, mongo_client=None):
    """Build the application.

    ``mongo_client`` lets callers supply an already constructed client (tests use
    an in-memory one); otherwise one is created from ``MONGO_URI``. If the first
    connection attempt fails the process exits.
    """
    from .infrastructure.mongo_store import MongoStore, connect_or_exit
    from .infrastructure.mongo_repositories import Repositories
    from .services import ImpactAggregator, ProjectMetricsJob, ProjectMetricsScheduler

    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    _configure_logging(app)

    # One owned store handle, shared by the repositories and the scheduler
    store = connect_or_exit(MongoStore.from_config(app.config, client=mongo_client))
    repositories = Repositories.from_store(store)
    app.extensions['store'] = store
    app.extensions['repositories'] = repositories
    app.extensions['impact_aggregator'] = ImpactAggregator(repositories)

    csrf.init_app(app)

    from .template_context import register_context_processors
    register_context_processors(app)

    from .routes import register_blueprints
    register_blueprints(app)
    register_error_handlers(app)

    job = ProjectMetricsJob(
        repositories.projects,
        hours=app.config.get('METRICS_HOURS_INCREMENT', 6),
        people=app.config.get('METRICS_PEOPLE_INCREMENT', 10),
    )
    app.extensions['metrics_job'] = job
    scheduler = None
    if app.config.get('METRICS_SCHEDULER_ENABLED'):
        scheduler = ProjectMetricsScheduler(
            job,
            hour=app.config.get('METRICS_SCHEDULE_HOUR', 0),
            minute=app.config.get('METRICS_SCHEDULE_MINUTE', 0),
        )
        scheduler.start()
        app.logger.info("Project metrics scheduler started (daily)")
    app.extensions['metrics_scheduler'] = scheduler

    if app.config.get('REQUEST_LOG') and not getattr(app, '_wsgi_logger_installed', False):
        app.wsgi_app = _wsgi_log_wrapper(app.wsgi_app)
        app._wsgi_logger_installed = True  # type: ignore

    if not app.config.get('TESTING'):
        def shutdown_handler():
            if scheduler is not None:
                scheduler.stop()
            store.close()
        atexit.register(shutdown_handler)

    app.logger.info("Flask app factory completed; application is ready to serve.")
    return app
