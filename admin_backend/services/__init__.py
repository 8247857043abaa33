"""
Services Package

Exports all services for easy importing.
"""

from admin_backend.services.accounts import (
    delete_account,
    find_user_by_id,
    find_users_by_ids,
    normalize_ids,
    verify_credentials,
)
from admin_backend.services.notifications import render_body, resolve_content, send_notifications
from admin_backend.services.settings import (
    get_subscription_enabled,
    get_template,
    list_active_templates,
    manager_categories,
    set_subscription_enabled,
)

__all__ = [
    'delete_account',
    'find_user_by_id',
    'find_users_by_ids',
    'normalize_ids',
    'verify_credentials',
    'render_body',
    'resolve_content',
    'send_notifications',
    'get_subscription_enabled',
    'get_template',
    'list_active_templates',
    'manager_categories',
    'set_subscription_enabled',
]
