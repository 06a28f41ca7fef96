import os
import secrets
from urllib.parse import urlparse
from dotenv import load_dotenv

# Load environment variables from .env file(s)
load_dotenv()


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1', 'yes']


def _database_name_from_uri(uri):
    """Return the database named in the URI path, if any."""
    path = urlparse(uri).path.lstrip('/')
    return path.split('?', 1)[0] or None


class Config:
    # Runtime mode flag; only 'development' discloses error details
    APP_ENV = (os.environ.get('APP_ENV') or os.environ.get('FLASK_ENV') or 'production').lower()

    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        if APP_ENV == 'development' or _env_flag('FLASK_DEBUG'):
            SECRET_KEY = secrets.token_hex(32)
            print("⚠️  WARNING: Using temporary SECRET_KEY for development. Set SECRET_KEY in .env for production!")
        else:
            # Every worker must share the key or form CSRF tokens fail across workers.
            raise ValueError("No SECRET_KEY set for Flask application. Please set it in your .env file.")

    # CSRF settings for the HTML forms
    WTF_CSRF_ENABLED = _env_flag('WTF_CSRF_ENABLED', 'true')
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Document store
    MONGO_URI = os.environ.get('MONGO_URI', 'mongodb://localhost:27017/ngo_volunteers')
    MONGO_DB_NAME = os.environ.get('MONGO_DB_NAME') or _database_name_from_uri(MONGO_URI) or 'ngo_volunteers'
    MONGO_CONNECT_TIMEOUT_MS = int(os.environ.get('MONGO_CONNECT_TIMEOUT_MS', 5000))

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'NGO Volunteer Management')
    DEFAULT_PAGE_TITLE = os.environ.get('DEFAULT_PAGE_TITLE', SITE_NAME)

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    REQUEST_LOG = _env_flag('REQUEST_LOG', 'true')

    # Daily project metrics job (server local time)
    METRICS_SCHEDULER_ENABLED = _env_flag('METRICS_SCHEDULER_ENABLED', 'true')
    METRICS_SCHEDULE_HOUR = int(os.environ.get('METRICS_SCHEDULE_HOUR', 0))
    METRICS_SCHEDULE_MINUTE = int(os.environ.get('METRICS_SCHEDULE_MINUTE', 0))
    METRICS_HOURS_INCREMENT = int(os.environ.get('METRICS_HOURS_INCREMENT', 6))
    METRICS_PEOPLE_INCREMENT = int(os.environ.get('METRICS_PEOPLE_INCREMENT', 10))

    # Form posts are small; reject anything unreasonable
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024


class TestingConfig(Config):
    TESTING = True
    APP_ENV = 'testing'
    SECRET_KEY = 'testing-secret-key'
    WTF_CSRF_ENABLED = False
    REQUEST_LOG = False
    METRICS_SCHEDULER_ENABLED = False
    MONGO_DB_NAME = 'ngo_volunteers_test'
