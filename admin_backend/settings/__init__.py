"""
Settings Blueprint

App settings toggles and catalog lookups for the admin screens.
"""

from flask import Blueprint

settings_bp = Blueprint('settings', __name__)

from admin_backend.settings import routes  # noqa: E402, F401
