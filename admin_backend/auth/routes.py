"""
Auth Routes

Admin login and token verification, plus public account lookups.
"""

import logging

from flask import jsonify, request
from flask_login import current_user, login_required

from admin_backend.auth import auth_bp
from admin_backend.auth.tokens import issue_token
from admin_backend.errors import NotFoundError, ValidationError
from admin_backend.services import delete_account, find_user_by_id, verify_credentials

logger = logging.getLogger(__name__)


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email/password for a signed 24h admin token."""
    body = _json_body()
    user = verify_credentials(body.get('email'), body.get('password'))
    token = issue_token(user)
    logger.info('Admin login: %s', user.email)
    return jsonify(
        success=True,
        message='Login successful',
        token=token,
        admin={
            'id': user.id,
            'email': user.email,
            'username': user.username,
            'role': user.admin_role,
        },
    )


@auth_bp.route('/verify')
@login_required
def verify():
    """Decoded claims of the presented token."""
    return jsonify(success=True, admin=current_user.claims)


@auth_bp.route('/user/email/<user_id>')
def user_email(user_id):
    """Contact details for the subscription page (public)."""
    user = find_user_by_id(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return jsonify(success=True, email=user.email or None, phone=user.phone or None)


@auth_bp.route('/delete-account', methods=['POST'])
def delete_account_by_email():
    """Account deletion requested from the public page."""
    email = _json_body().get('email')
    if email is not None and not isinstance(email, str):
        raise ValidationError('Invalid email format')
    delete_account(email)
    return jsonify(success=True, message='Account deleted successfully')
