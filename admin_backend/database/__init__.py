"""
Database Blueprint

Generic table browser/editor. Every route requires an admin token.
"""

from flask import Blueprint

database_bp = Blueprint('database', __name__)

from admin_backend.database import routes  # noqa: E402, F401
