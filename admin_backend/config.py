"""
Configuration settings for the Admin Backend
"""
import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _database_url(basedir):
    """Resolve DATABASE_URL, pinning PostgreSQL URLs to the psycopg driver."""
    url = os.environ.get('DATABASE_URL')
    if not url:
        return 'sqlite:///' + os.path.join(basedir, 'instance', 'admin_backend.db')
    if url.startswith('postgres://'):
        url = 'postgresql://' + url[len('postgres://'):]
    if url.startswith('postgresql://'):
        url = 'postgresql+psycopg://' + url[len('postgresql://'):]
    return url


class Config:
    """Flask application configuration"""

    # Flask secret key
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Signed admin credentials
    JWT_SECRET = os.environ.get('JWT_SECRET') or 'your_jwt_secret_key_change_this_in_production'
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_HOURS = int(os.environ.get('JWT_EXPIRES_HOURS', 24))

    # Comma separated roles allowed to log in; empty means any active account
    ADMIN_ALLOWED_ROLES = [
        role.strip() for role in os.environ.get('ADMIN_ALLOWED_ROLES', '').split(',') if role.strip()
    ]

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = _database_url(basedir)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_size': int(os.environ.get('DB_POOL_SIZE', 5)),
        'max_overflow': int(os.environ.get('DB_MAX_OVERFLOW', 10)),
        'pool_timeout': int(os.environ.get('DB_POOL_TIMEOUT', 30)),
    }

    # Schema browsed by the table editor (None = connection default, e.g. public)
    DB_SCHEMA = os.environ.get('DB_SCHEMA') or None

    # Create the modelled tables on startup (the production schema is external)
    AUTO_CREATE_TABLES = _env_flag('AUTO_CREATE_TABLES', False)

    # Table browser settings
    DEFAULT_PAGE_SIZE = 100
    MAX_PAGE_SIZE = int(os.environ.get('MAX_PAGE_SIZE', 1000))
    RAW_QUERY_ENABLED = _env_flag('RAW_QUERY_ENABLED', True)

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_JSON = _env_flag('LOG_JSON', False)


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DB_SCHEMA = None
    AUTO_CREATE_TABLES = True
    JWT_SECRET = 'test-jwt-secret'
    RAW_QUERY_ENABLED = True
    ADMIN_ALLOWED_ROLES = []
    LOG_LEVEL = 'DEBUG'
