"""
Notification Models
"""

from admin_backend.extensions import db

NOTIFICATION_TYPES = ('outstanding_payment', 'admin_notification', 'system_notification')
NOTIFICATION_ROLES = ('manager', 'cashier')


class NotificationTemplate(db.Model):
    """Reusable title/message pair for admin notifications"""
    __tablename__ = 'notification_templates'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(80))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'title': self.title,
            'message': self.message,
            'category': self.category,
            'is_active': self.is_active,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f'<NotificationTemplate {self.name}>'


class Notification(db.Model):
    """In-app notification shown to a manager or cashier"""
    __tablename__ = 'notifications'
    __table_args__ = (
        db.CheckConstraint(
            "type IN ('outstanding_payment', 'admin_notification', 'system_notification')",
            name='notifications_type_check'),
        db.CheckConstraint("user_role IN ('manager', 'cashier')", name='notifications_user_role_check'),
    )

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.String(64), nullable=False, index=True)
    transaction_id = db.Column(db.String(120), nullable=False)
    receipt_number = db.Column(db.String(120), nullable=False)
    customer_id = db.Column(db.String(64))
    customer_name = db.Column(db.String(255))
    customer_phone = db.Column(db.String(50))
    admin_title = db.Column(db.String(255))
    admin_message = db.Column(db.Text)
    type = db.Column(db.String(40), nullable=False)
    user_role = db.Column(db.String(20), nullable=False)
    total = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    paid_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    outstanding_balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    def __repr__(self):
        return f'<Notification {self.type} account:{self.account_id}>'
