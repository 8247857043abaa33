"""
Admin Backend - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from admin_backend.config import Config
from admin_backend.errors import register_error_handlers
from admin_backend.extensions import db, login_manager
from admin_backend.log_config import configure_logging
from admin_backend.serialization import AdminJSONProvider

logger = logging.getLogger(__name__)

API_VERSION = '1.0.0'


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json = AdminJSONProvider(app)

    configure_logging(app.config['LOG_LEVEL'], app.config['LOG_JSON'])

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Register blueprints
    from admin_backend.auth import auth_bp
    from admin_backend.database import database_bp
    from admin_backend.notifications import notifications_bp
    from admin_backend.settings import settings_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(database_bp, url_prefix='/api/database')
    app.register_blueprint(notifications_bp, url_prefix='/api/database')
    app.register_blueprint(settings_bp, url_prefix='/api/database')

    register_error_handlers(app)

    @app.before_request
    def log_request():
        logger.info('%s %s', request.method, request.path)

    @app.route('/health')
    def health():
        return jsonify(success=True, message='Server is running',
                       timestamp=datetime.now(timezone.utc).isoformat())

    @app.route('/api')
    def api_index():
        return jsonify(success=True, message='Admin API', version=API_VERSION,
                       endpoints=_endpoint_index())

    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            import admin_backend.models  # noqa: F401
            db.create_all()

    return app


def _endpoint_index():
    return {
        'auth': {
            'login': 'POST /api/auth/login',
            'verify': 'GET /api/auth/verify',
        },
        'database': {
            'tables': 'GET /api/database/tables',
            'tableStructure': 'GET /api/database/tables/:tableName/structure',
            'tableData': 'GET /api/database/tables/:tableName/data',
            'getRecord': 'GET /api/database/tables/:tableName/data/:id',
            'createRecord': 'POST /api/database/tables/:tableName/data',
            'updateRecord': 'PUT /api/database/tables/:tableName/data/:id',
            'deleteRecord': 'DELETE /api/database/tables/:tableName/data/:id',
            'customQuery': 'POST /api/database/query',
        },
        'notifications': {
            'templates': 'GET /api/database/notification-templates',
            'send': 'POST /api/database/notifications/send',
        },
    }
