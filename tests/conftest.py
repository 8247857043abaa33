import pytest
from werkzeug.security import generate_password_hash

from admin_backend import create_app
from admin_backend.config import TestConfig
from admin_backend.extensions import db
from admin_backend.models import User

ADMIN_EMAIL = 'a@b.com'
ADMIN_PASSWORD = 'secret123'


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(**fields):
    password = fields.pop('password', None)
    if password is not None:
        fields['password_hash'] = generate_password_hash(password)
    user = User(**fields)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def admin_user(app):
    return make_user(
        id='admin-1',
        email=ADMIN_EMAIL,
        username='admin',
        password=ADMIN_PASSWORD,
        role='admin',
        is_active=True,
    )


@pytest.fixture()
def token(client, admin_user):
    r = client.post('/api/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert r.status_code == 200
    return r.get_json()['token']


@pytest.fixture()
def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


def run_sql(*statements):
    with db.engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)


@pytest.fixture()
def orders_table(app):
    """An `orders` table with 25 rows, ids 1..25."""
    run_sql('CREATE TABLE orders (id INTEGER PRIMARY KEY, customer TEXT NOT NULL, '
            'amount NUMERIC, status TEXT DEFAULT \'new\', created_at TEXT)')
    with db.engine.begin() as conn:
        conn.exec_driver_sql(
            'INSERT INTO orders (id, customer, amount, status, created_at) VALUES (?, ?, ?, ?, ?)',
            [(i, f'customer-{i}', i * 10, 'paid' if i % 2 else 'new', f'2024-01-{i:02d}')
             for i in range(1, 26)],
        )
    return 'orders'


@pytest.fixture()
def keyless_table(app):
    """A table without a primary key."""
    run_sql('CREATE TABLE audit_log (message TEXT, created_at TEXT)')
    with db.engine.begin() as conn:
        conn.exec_driver_sql(
            'INSERT INTO audit_log (message, created_at) VALUES (?, ?)',
            [(f'event {i}', f'2024-02-{i:02d}') for i in range(1, 4)],
        )
    return 'audit_log'
