"""
Error taxonomy and JSON error handlers.

Every failure leaves the API as `{"success": false, "message": ...}` with the
status code carried by the exception.
"""

import logging

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError, DBAPIError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AdminAPIError(Exception):
    """Base class for errors rendered as a JSON envelope."""
    status_code = 500

    def __init__(self, message, status_code=None, error=None, hint=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error = error
        self.hint = hint

    def to_dict(self):
        payload = {'success': False, 'message': self.message}
        if self.error:
            payload['error'] = self.error
        if self.hint:
            payload['hint'] = self.hint
        return payload


class ValidationError(AdminAPIError):
    """Missing or malformed input."""
    status_code = 400


class AuthError(AdminAPIError):
    """Missing, invalid or expired credential (403 for refused accounts)."""
    status_code = 401


class NotFoundError(AdminAPIError):
    """Unknown table, row or template."""
    status_code = 404


class SafetyRejection(AdminAPIError):
    """Raw SQL refused by the denylist."""
    status_code = 403


class DataLayerError(AdminAPIError):
    """Connectivity, missing table or constraint failure in the database."""
    status_code = 500


class InternalError(AdminAPIError):
    """Anything unexpected."""
    status_code = 500


# SQLSTATE codes (PostgreSQL) used to classify driver errors
_AUTH_SQLSTATES = {'28000', '28P01'}
_MISSING_TABLE_SQLSTATES = {'42P01'}

_HOSTNAME_MARKERS = (
    'could not translate host name',
    'name or service not known',
    'nodename nor servname provided',
    'temporary failure in name resolution',
    'getaddrinfo',
)
_AUTH_MARKERS = ('password authentication failed', 'authentication failed')
_MISSING_TABLE_MARKERS = ('no such table', 'relation', 'undefinedtable')


def _driver_sqlstate(orig):
    # psycopg 3 exposes `sqlstate`, psycopg2 exposes `pgcode`
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def classify_database_error(exc):
    """Map a SQLAlchemy error onto a DataLayerError with an operator hint."""
    orig = exc.orig if isinstance(exc, DBAPIError) else None
    sqlstate = _driver_sqlstate(orig) if orig is not None else None
    detail = str(orig if orig is not None else exc).strip()
    lowered = detail.lower()

    if any(marker in lowered for marker in _HOSTNAME_MARKERS):
        return DataLayerError(
            'Database host could not be resolved',
            error=detail,
            hint='Check the host in DATABASE_URL. Serverless deployments should use '
                 'the connection pooler URL rather than the direct database host.',
        )
    # message markers only stand in when the driver reports no SQLSTATE
    if sqlstate:
        is_auth = sqlstate in _AUTH_SQLSTATES
        is_missing_table = sqlstate in _MISSING_TABLE_SQLSTATES
    else:
        is_auth = any(marker in lowered for marker in _AUTH_MARKERS)
        is_missing_table = (any(marker in lowered for marker in _MISSING_TABLE_MARKERS) and
                            ('does not exist' in lowered or 'no such table' in lowered))

    if is_auth:
        return DataLayerError(
            'Database authentication failed',
            error=detail,
            hint='Check the user name and password in DATABASE_URL.',
        )
    if is_missing_table:
        return DataLayerError(
            'Database table does not exist',
            error=detail,
            hint='The table may have been renamed or dropped; refresh the table list '
                 'or run the schema migrations for this database.',
        )
    return DataLayerError(
        'Database error',
        error=detail,
        hint='See the server log for the failing statement.',
    )


def register_error_handlers(app):
    """Install JSON error handlers on the Flask app."""

    @app.errorhandler(AdminAPIError)
    def handle_admin_error(exc):
        if exc.status_code >= 500:
            logger.error('%s %s failed: %s (%s)', request.method, request.path, exc.message, exc.error)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        logger.exception('Database error on %s %s', request.method, request.path)
        error = classify_database_error(exc)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code == 404:
            message = 'Route not found'
        elif exc.code == 405:
            message = 'Method not allowed'
        else:
            message = exc.description
        return jsonify({'success': False, 'message': message}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        error = InternalError(
            'Internal server error',
            error=repr(exc) if current_app.debug else None,
        )
        return jsonify(error.to_dict()), error.status_code
