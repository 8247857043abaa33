"""
Signed admin credentials.

Tokens are HS256 JWTs carrying {id, email, username, role}. Flask-Login's
request loader turns a valid token into `current_user`; nothing is stored
server side.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from flask import current_app, g
from flask_login import UserMixin

from admin_backend.errors import AuthError
from admin_backend.extensions import login_manager

logger = logging.getLogger(__name__)

TOKEN_HEADER = 'x-auth-token'
CLAIM_FIELDS = ('id', 'email', 'username', 'role')


class AdminPrincipal(UserMixin):
    """Authenticated admin decoded from a token."""

    def __init__(self, claims: Dict[str, Any]):
        self.claims = dict(claims)
        self.id = claims.get('id')
        self.email = claims.get('email')
        self.username = claims.get('username')
        self.role = claims.get('role')

    def get_id(self):
        return str(self.id)

    def to_dict(self):
        return {field: getattr(self, field) for field in CLAIM_FIELDS}

    def __repr__(self):
        return f'<AdminPrincipal {self.email} ({self.role})>'


def _claim_id(value):
    # UUID and other driver types are not JSON serializable
    if isinstance(value, (int, str)) or value is None:
        return value
    return str(value)


def issue_token(user) -> str:
    """Sign a time-boxed credential for a user record."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=current_app.config['JWT_EXPIRES_HOURS'])
    payload = {
        'id': _claim_id(user.id),
        'email': user.email,
        'username': user.username,
        'role': user.admin_role,
        'iat': now,
        'exp': expires,
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; raise AuthError otherwise."""
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.InvalidTokenError as exc:
        logger.info('Rejected token: %s', exc)
        raise AuthError('Invalid or expired token') from exc


def extract_token(request) -> Optional[str]:
    """Bearer token from the Authorization header, else the custom header."""
    authorization = request.headers.get('Authorization', '')
    parts = authorization.split(' ')
    if len(parts) == 2 and parts[0].lower() == 'bearer' and parts[1]:
        return parts[1]
    return request.headers.get(TOKEN_HEADER) or None


def authenticate(request) -> AdminPrincipal:
    """Resolve the request's admin principal or raise AuthError."""
    token = extract_token(request)
    if not token:
        raise AuthError('No token provided')
    return AdminPrincipal(decode_token(token))


@login_manager.request_loader
def load_admin_from_request(request):
    try:
        return authenticate(request)
    except AuthError as exc:
        g.auth_error = exc
        return None


@login_manager.unauthorized_handler
def unauthorized():
    raise g.pop('auth_error', None) or AuthError('Authentication required')
