"""
Logging configuration for the Admin Backend.

Modules log through `logging.getLogger(__name__)`; the application factory
calls `configure_logging` once with LOG_LEVEL and LOG_JSON from the app config.
Records emitted while a request is being handled carry its method and path.
"""

from __future__ import annotations

import json
import logging
import logging.config

from flask import has_request_context, request

CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(request_line)s%(message)s'


class RequestContextFilter(logging.Filter):
    """Attach the current request's method and path to every record."""

    def filter(self, record):
        if has_request_context():
            record.method = request.method
            record.path = request.path
            record.request_line = f'{request.method} {request.path} | '
        else:
            record.method = record.path = None
            record.request_line = ''
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        payload = {
            'time': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if getattr(record, 'method', None):
            payload['method'] = record.method
            payload['path'] = record.path
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str = 'INFO', json_logs: bool = False) -> None:
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'request': {'()': RequestContextFilter},
        },
        'formatters': {
            'console': {'format': CONSOLE_FORMAT, 'datefmt': '%Y-%m-%d %H:%M:%S'},
            'json': {'()': JsonFormatter},
        },
        'handlers': {
            'default': {
                'class': 'logging.StreamHandler',
                'formatter': 'json' if json_logs else 'console',
                'filters': ['request'],
            },
        },
        'root': {'handlers': ['default'], 'level': level},
    })
