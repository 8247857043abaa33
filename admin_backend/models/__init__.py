"""
Models Package

Exports all models for easy importing.
"""

from admin_backend.models.user import User
from admin_backend.models.notification import Notification, NotificationTemplate
from admin_backend.models.setting import AppSetting

__all__ = ['User', 'Notification', 'NotificationTemplate', 'AppSetting']
