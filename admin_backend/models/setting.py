"""
App Setting Model
"""

from admin_backend.extensions import db


class AppSetting(db.Model):
    """Key/JSON-value application setting"""
    __tablename__ = 'app_settings'

    key = db.Column(db.String(120), primary_key=True)
    value = db.Column(db.JSON)
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    def __repr__(self):
        return f'<AppSetting {self.key}={self.value!r}>'
