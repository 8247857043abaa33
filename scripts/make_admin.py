"""Create an admin user, or promote and reset an existing one.

Usage: python scripts/make_admin.py <email> <password> [username]
"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from admin_backend import create_app
from admin_backend.extensions import db
from admin_backend.models import User


def main(argv):
    if len(argv) < 3:
        print(__doc__)
        return 1
    email, password = argv[1].strip().lower(), argv[2]
    username = argv[3] if len(argv) > 3 else email.split('@')[0]

    app = create_app()
    with app.app_context():
        user = User.query.filter(db.func.lower(User.email) == email).first()
        if not user:
            user = User(email=email, username=username)
            db.session.add(user)
            print("New admin user created")
        else:
            print("Existing user promoted to admin")
        user.password_hash = generate_password_hash(password)
        user.role = 'admin'
        user.is_active = True
        db.session.commit()
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
