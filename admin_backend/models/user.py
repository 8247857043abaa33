"""
User Model

The users table is shared with the client apps; admins are users whose
credentials pass the login checks in admin_backend.auth.
"""

import uuid

from admin_backend.extensions import db

DEFAULT_ADMIN_ROLE = 'admin'


def _new_user_id():
    return str(uuid.uuid4())


class User(db.Model):
    """Application user (managers, cashiers and admins)"""
    __tablename__ = 'users'

    id = db.Column(db.String(64), primary_key=True, default=_new_user_id)
    email = db.Column(db.String(255), unique=True, index=True)
    username = db.Column(db.String(120))
    password_hash = db.Column(db.String(255))
    role = db.Column(db.String(50))
    is_active = db.Column(db.Boolean, default=True)
    phone = db.Column(db.String(50))
    first_name = db.Column(db.String(120))
    last_name = db.Column(db.String(120))
    business_type = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    @property
    def admin_role(self):
        """Role carried by admin tokens; accounts without one count as admins."""
        return self.role or DEFAULT_ADMIN_ROLE

    def to_profile(self):
        """Fields available to notification placeholders."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'phone': self.phone,
        }

    def __repr__(self):
        return f'<User {self.email}>'
