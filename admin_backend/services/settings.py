"""
App settings and admin catalog helpers.
"""

import logging

from sqlalchemy import func

from admin_backend.database.introspection import table_exists
from admin_backend.errors import DataLayerError, NotFoundError
from admin_backend.extensions import db
from admin_backend.models import AppSetting, NotificationTemplate, User

logger = logging.getLogger(__name__)

SUBSCRIPTION_SETTING_KEY = 'subscription_visible'
DEFAULT_SUBSCRIPTION_ENABLED = 'true'


def _as_flag_string(value):
    """Lowercase string form of a stored JSON value."""
    if value is None:
        return DEFAULT_SUBSCRIPTION_ENABLED
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value).lower()


def get_subscription_enabled():
    if not table_exists(AppSetting.__tablename__):
        return DEFAULT_SUBSCRIPTION_ENABLED
    setting = db.session.get(AppSetting, SUBSCRIPTION_SETTING_KEY)
    if setting is None:
        return DEFAULT_SUBSCRIPTION_ENABLED
    return _as_flag_string(setting.value)


def set_subscription_enabled(raw_value):
    """Update the existing subscription setting; never inserts a new row."""
    enabled = str(raw_value).lower() == 'true'
    if not table_exists(AppSetting.__tablename__):
        raise DataLayerError('app_settings table does not exist', error='Table not found')

    setting = db.session.get(AppSetting, SUBSCRIPTION_SETTING_KEY)
    if setting is None:
        raise NotFoundError(
            'Setting not found. Please create the subscription_visible setting first.',
            error='Record not found')

    try:
        setting.value = enabled
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info('subscription_visible set to %s', enabled)
    return enabled


def list_active_templates():
    templates = (NotificationTemplate.query
                 .filter_by(is_active=True)
                 .order_by(NotificationTemplate.name)
                 .all())
    return [template.to_dict() for template in templates]


def get_template(template_id):
    template = db.session.get(NotificationTemplate, template_id)
    if template is None:
        raise NotFoundError('Template not found')
    return template.to_dict()


def manager_categories():
    """Business types of managers with their head count."""
    rows = (db.session.query(User.business_type, func.count(User.id))
            .filter(User.role == 'manager',
                    User.business_type.isnot(None),
                    User.business_type != '')
            .group_by(User.business_type)
            .order_by(User.business_type)
            .all())
    return [{'category': category, 'count': count} for category, count in rows]
