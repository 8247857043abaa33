"""
Notification Dispatcher

Resolves recipients, renders the message for each of them and writes one
notification row per recipient. Every write is independent: a failing
recipient is reported in `errors` and the batch carries on.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from admin_backend.errors import NotFoundError, ValidationError
from admin_backend.extensions import db
from admin_backend.models import Notification, NotificationTemplate
from admin_backend.services.accounts import find_users_by_ids, normalize_ids

logger = logging.getLogger(__name__)

PROFILE_PLACEHOLDERS = ('username', 'first_name', 'last_name', 'email')
_PLACEHOLDER = re.compile(r'\{(\w+)\}')


@dataclass
class SendResult:
    """Outcome of the write for one recipient."""
    user_id: Any
    notification_id: Optional[int] = None
    email: Optional[str] = None
    username: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class NotificationJob:
    recipient_ids: List[str]
    title: str
    body: str
    custom_data: Dict[str, Any] = field(default_factory=dict)
    results: List[SendResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        sent = [result for result in self.results if result.ok]
        failed = [result for result in self.results if not result.ok]
        payload = {
            'message': f'Notifications sent to {len(sent)} user(s)',
            'notifications': [
                {
                    'userId': result.user_id,
                    'notificationId': result.notification_id,
                    'userEmail': result.email,
                    'userName': result.username,
                }
                for result in sent
            ],
        }
        if failed:
            payload['errors'] = [{'userId': result.user_id, 'error': result.error} for result in failed]
        return payload


def resolve_content(template_id=None, title=None, message=None):
    """Final (title, message): explicit values override the template's."""
    if template_id:
        try:
            template_id = int(template_id)
        except (TypeError, ValueError):
            raise NotFoundError('Template not found or inactive')
        template = NotificationTemplate.query.filter_by(id=template_id, is_active=True).first()
        if template is None:
            raise NotFoundError('Template not found or inactive')
        title = title or template.title
        message = message or template.message

    if not title or not message:
        raise ValidationError('Title and message are required')
    return title, message


def render_body(body: str, profile: Mapping[str, Any], custom_data: Optional[Mapping[str, Any]] = None) -> str:
    """Replace `{token}` placeholders; profile fields win over custom data."""
    values = {key: value for key, value in (custom_data or {}).items() if value is not None}
    for name in PROFILE_PLACEHOLDERS:
        values[name] = profile.get(name) or ''

    def substitute(match):
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    return _PLACEHOLDER.sub(substitute, body)


def build_notification(user, title: str, body: str) -> Notification:
    stamp = int(time.time() * 1000)
    full_name = f'{user.first_name or ""} {user.last_name or ""}'.strip()
    return Notification(
        account_id=str(user.id),
        transaction_id=f'notif-{stamp}-{user.id}',
        receipt_number=f'NOTIF-{stamp}',
        customer_id=str(user.id),
        customer_name=full_name or user.username or 'User',
        customer_phone=user.phone or '',
        admin_title=title,
        admin_message=body,
        type='admin_notification',
        user_role='manager',
        total=0,
        paid_amount=0,
        outstanding_balance=0,
        read=False,
    )


def _send_one(user, job: NotificationJob) -> SendResult:
    try:
        body = render_body(job.body, user.to_profile(), job.custom_data)
        notification = build_notification(user, job.title, body)
        db.session.add(notification)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Error creating notification for user %s: %s', user.id, exc)
        return SendResult(user_id=user.id, error=str(getattr(exc, 'orig', None) or exc))
    return SendResult(
        user_id=user.id,
        notification_id=notification.id,
        email=user.email,
        username=user.username,
    )


def send_notifications(user_ids, template_id=None, title=None, message=None, custom_data=None) -> NotificationJob:
    """Create one notification per resolvable recipient."""
    if not isinstance(user_ids, list) or not user_ids:
        raise ValidationError('User IDs are required')
    if not template_id and not title and not message:
        raise ValidationError('Either template ID or title/message is required')
    if custom_data is not None and not isinstance(custom_data, Mapping):
        raise ValidationError('customData must be an object')

    final_title, final_message = resolve_content(template_id, title, message)
    job = NotificationJob(
        recipient_ids=normalize_ids(user_ids),
        title=final_title,
        body=final_message,
        custom_data=dict(custom_data or {}),
    )

    recipients = find_users_by_ids(job.recipient_ids)
    if not recipients:
        logger.warning('No users found for ids %s', job.recipient_ids)
        raise NotFoundError(f'No users found with the provided IDs. Checked {len(user_ids)} IDs.')

    job.results = [_send_one(user, job) for user in recipients]
    logger.info('Sent %d notification(s), %d failed',
                sum(1 for result in job.results if result.ok),
                sum(1 for result in job.results if not result.ok))
    return job
