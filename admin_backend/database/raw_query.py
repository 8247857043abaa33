"""
Raw SQL escape hatch.

The denylist is a plain case-insensitive substring check. It stops the
obvious destructive statements and nothing more: it is not a parser and
obfuscated SQL gets past it. Set RAW_QUERY_ENABLED=false to turn the
endpoint off.
"""

import logging

from flask import current_app

from admin_backend.errors import SafetyRejection, ValidationError
from admin_backend.extensions import db

logger = logging.getLogger(__name__)

DENYLISTED_KEYWORDS = ('DROP', 'TRUNCATE', 'DELETE FROM', 'ALTER TABLE', 'CREATE TABLE', 'DROP TABLE')


def find_denylisted_keyword(sql):
    """First denylisted keyword found anywhere in the statement, or None."""
    upper = sql.upper()
    for keyword in DENYLISTED_KEYWORDS:
        if keyword in upper:
            return keyword
    return None


def check_statement(sql):
    """Validate a raw statement, raising before anything reaches the database."""
    if not isinstance(sql, str) or not sql.strip():
        raise ValidationError('SQL query is required')
    if not current_app.config.get('RAW_QUERY_ENABLED', True):
        raise SafetyRejection('Raw SQL execution is disabled')
    keyword = find_denylisted_keyword(sql)
    if keyword is not None:
        logger.warning('Rejected raw query containing %s', keyword)
        raise SafetyRejection('This operation is not allowed for security reasons')


def execute_raw(sql):
    """Run a checked statement verbatim and return (rows, row_count)."""
    check_statement(sql)
    logger.info('Executing raw query: %s', sql)
    with db.engine.begin() as conn:
        # no_parameters: the statement is sent as-is, without paramstyle escaping
        result = conn.execution_options(no_parameters=True).exec_driver_sql(sql)
        rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        row_count = result.rowcount
    if row_count is None or row_count < 0:
        row_count = len(rows)
    return rows, row_count
