"""
Account lookups shared by the auth and notification routes.

User ids arrive as integers, strings or UUIDs depending on the client. They
are normalized to canonical strings first; lookups then try a typed match
and fall back to comparing the id column's text form.
"""

import logging
import re

from flask import current_app
from sqlalchemy import Text, cast, func
from sqlalchemy.exc import DBAPIError
from werkzeug.security import check_password_hash

from admin_backend.errors import AuthError, NotFoundError, ValidationError
from admin_backend.extensions import db
from admin_backend.models import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def normalize_ids(raw_ids):
    """Canonical string form of each id, deduplicated, order kept."""
    seen = []
    for raw in raw_ids:
        if raw is None or isinstance(raw, (dict, list, bool)):
            continue
        canonical = str(raw).strip()
        if canonical and canonical not in seen:
            seen.append(canonical)
    return seen


def find_users_by_ids(user_ids):
    """Users matching any of the ids; unknown ids are simply absent."""
    ids = normalize_ids(user_ids)
    if not ids:
        return []

    found = {}
    try:
        for user in User.query.filter(User.id.in_(ids)).all():
            found[str(user.id)] = user
    except DBAPIError as exc:
        # e.g. "u1" against an integer or uuid column
        db.session.rollback()
        logger.debug('Typed id lookup failed, falling back to text match: %s', exc.orig)

    remaining = [user_id for user_id in ids if user_id not in found]
    if remaining:
        for user in User.query.filter(cast(User.id, Text).in_(remaining)).all():
            found[str(user.id)] = user

    logger.debug('Resolved %d of %d user ids', len(found), len(ids))
    return [found[user_id] for user_id in ids if user_id in found]


def find_user_by_id(user_id):
    users = find_users_by_ids([user_id])
    return users[0] if users else None


def verify_credentials(email, password):
    """The active user owning these credentials, or AuthError."""
    if not email or not password:
        raise ValidationError('Email and password are required')

    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if user is None:
        raise AuthError('Invalid credentials')
    if not user.password_hash:
        raise AuthError('User account not properly configured')
    try:
        password_ok = check_password_hash(user.password_hash, password)
    except ValueError:
        logger.warning('Unsupported password hash format for user %s', user.id)
        raise AuthError('User account not properly configured')
    if not password_ok:
        raise AuthError('Invalid credentials')
    if user.is_active is False:
        raise AuthError('Account is inactive', status_code=403)

    allowed_roles = current_app.config.get('ADMIN_ALLOWED_ROLES') or []
    if allowed_roles and user.admin_role not in allowed_roles:
        logger.warning('Login refused for %s with role %s', user.email, user.role)
        raise AuthError('Account is not allowed to access the admin panel', status_code=403)
    return user


def delete_account(email):
    """Delete the account registered under an email address."""
    if not email:
        raise ValidationError('Email is required')
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Invalid email format')

    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if user is None:
        raise NotFoundError(
            'No account found with this email address. Please check your email and try again.')

    try:
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info('Deleted account %s', user.id)
    return user
