"""
Configuration settings for the Portfolio site and admin console
"""
import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""

    # Flask secret key for the signed session cookie
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration (point DATABASE_URL at the hosted Postgres in production)
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'portfolio.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Hosted backend (auth provider + object storage)
    BACKEND_URL = os.environ.get('BACKEND_URL') or 'http://localhost:54321'
    BACKEND_ANON_KEY = os.environ.get('BACKEND_ANON_KEY') or ''
    BACKEND_TIMEOUT = float(os.environ.get('BACKEND_TIMEOUT') or 10)

    # Seconds a cached content list stays valid when no mutation invalidates it
    LIST_CACHE_TTL = int(os.environ.get('LIST_CACHE_TTL') or 60)

    # Startup behaviour
    BOOTSTRAP_ON_STARTUP = _env_flag('BOOTSTRAP_ON_STARTUP', True)
    AUTO_CREATE_SCHEMA = _env_flag('AUTO_CREATE_SCHEMA', True)

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Upload size limit (avatars, project images, resumes)
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BACKEND_URL = 'http://backend.test'
    BACKEND_ANON_KEY = 'test-anon-key'
    BOOTSTRAP_ON_STARTUP = False
    AUTO_CREATE_SCHEMA = True
