"""
Auth Blueprint

Token-based admin authentication plus the public account self-service
endpoints used by the client apps.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from admin_backend.auth import routes  # noqa: E402, F401
