"""
Flask Extensions

Admin requests are authenticated statelessly: Flask-Login resolves
`current_user` from the bearer token on every request, no session is kept.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance (its engine owns the shared connection pool)
db = SQLAlchemy()

# Login manager backed by a request loader (see admin_backend.auth.tokens)
login_manager = LoginManager()
