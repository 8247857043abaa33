"""
Notification Routes
"""

from flask import jsonify, request
from flask_login import login_required

from admin_backend.notifications import notifications_bp
from admin_backend.services import get_template, list_active_templates, send_notifications


@notifications_bp.route('/notification-templates')
@login_required
def notification_templates():
    return jsonify(success=True, templates=list_active_templates())


@notifications_bp.route('/notification-templates/<int:template_id>')
@login_required
def notification_template(template_id):
    return jsonify(success=True, template=get_template(template_id))


@notifications_bp.route('/notifications/send', methods=['POST'])
@login_required
def send():
    """Send a templated or literal notification to a list of users.

    Body: {userIds, templateId | title + message, customData?}
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    job = send_notifications(
        body.get('userIds'),
        template_id=body.get('templateId'),
        title=body.get('title'),
        message=body.get('message'),
        custom_data=body.get('customData'),
    )
    return jsonify(success=True, **job.to_dict())
