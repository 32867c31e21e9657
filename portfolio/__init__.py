"""
Portfolio - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the public portfolio site and its admin console.
"""

import logging
import os

import click
from flask import Flask, render_template

from portfolio.config import Config
from portfolio.extensions import db, auth_client, storage_client, list_cache, session_manager

logger = logging.getLogger(__name__)

BOOTSTRAP_EXTENSION_KEY = 'portfolio.bootstrap_result'


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get('TESTING'):
        _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    auth_client.init_app(app)
    storage_client.init_app(app)
    list_cache.init_app(app)
    session_manager.init_app(app, auth_client)
    session_manager.subscribe(_log_auth_event)

    # Register blueprints
    from portfolio.site import site_bp
    from portfolio.admin import admin_bp

    app.register_blueprint(site_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')

    @app.errorhandler(404)
    def not_found(error):
        return render_template('not_found.html'), 404

    # Context processor for the admin session and the startup bootstrap banner
    @app.context_processor
    def inject_admin_state():
        return dict(admin_session=session_manager.state,
                    bootstrap_result=app.extensions.get(BOOTSTRAP_EXTENSION_KEY))

    @app.template_filter('display_date')
    def display_date_filter(value, fmt='%b %Y'):
        if not value:
            return ''
        return value.strftime(fmt)

    _register_commands(app)

    with app.app_context():
        if app.config.get('AUTO_CREATE_SCHEMA'):
            os.makedirs(app.instance_path, exist_ok=True)
            db.create_all()
        if app.config.get('BOOTSTRAP_ON_STARTUP'):
            run_bootstrap(app)

    return app


def run_bootstrap(app):
    """Run the backend bootstrap and keep its result for the admin banner."""
    from portfolio.services.bootstrap import initialize_backend

    result = initialize_backend()
    app.extensions[BOOTSTRAP_EXTENSION_KEY] = result
    if result.success:
        logger.info('%s: %s', result.title, result.description)
    else:
        logger.error('%s: %s', result.title, result.description)
    return result


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level,
                        format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(level)


def _log_auth_event(event, state):
    logger.info('Auth state changed: %s (%s)', event, state.email or 'unknown user')


def _register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Create every table defined by the models."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('bootstrap')
    def bootstrap_command():
        """Probe tables and buckets, seeding sample rows into empty tables."""
        result = run_bootstrap(app)
        click.echo(f'{result.title}: {result.description}')
        if not result.success:
            raise SystemExit(1)
