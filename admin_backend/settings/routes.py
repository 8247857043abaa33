"""
Settings Routes
"""

from flask import jsonify, request
from flask_login import login_required

from admin_backend.settings import settings_bp
from admin_backend.services import get_subscription_enabled, manager_categories, set_subscription_enabled


@settings_bp.route('/app-setting')
@login_required
def get_app_setting():
    """Subscription visibility; defaults to enabled."""
    return jsonify(success=True, data={'subscription_enabled': get_subscription_enabled()})


@settings_bp.route('/app-setting', methods=['PUT'])
@login_required
def update_app_setting():
    body = request.get_json(silent=True) or {}
    enabled = set_subscription_enabled(body.get('subscription_enabled') if isinstance(body, dict) else None)
    return jsonify(success=True, message='App settings updated successfully',
                   data={'subscription_enabled': enabled})


@settings_bp.route('/managers/categories')
@login_required
def get_manager_categories():
    return jsonify(success=True, categories=manager_categories())
