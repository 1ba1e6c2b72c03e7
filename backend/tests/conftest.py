"""
Pytest fixtures for club POS backend tests.

Provides test database setup, store/engine wiring, factories, and an
authenticated test client per staff role.
"""

from decimal import Decimal
from itertools import count

import pytest

from clubpos import create_app
from clubpos.extensions import db
from clubpos.models import Member, Product
from clubpos.permissions import Role
from clubpos.services.auth_service import create_staff
from clubpos.services.concurrency import KeyedLocks
from clubpos.services.pos import PointOfSale

TEST_PASSWORD = "Password123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'CLUBPOS_TIMEZONE': 'UTC',
        'CLUBPOS_LOW_STOCK_THRESHOLD': 50,
        'CLUBPOS_CURRENCY': 'EUR',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema (Core deletes bypass the ledger guards)
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.expunge_all()
        app.extensions["clubpos_carts"].clear()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def pos(db_session):
    """Stores and engines around the test session, with private locks."""
    return PointOfSale(session=db_session, locks=KeyedLocks())


_doc_numbers = count(1)


@pytest.fixture(scope='function')
def make_member(db_session):
    """
    Factory for members. balance_cents is written directly, so use
    pos.wallet.deposit instead when the test checks the ledger.
    """
    def _make(full_name="Ana García", doc_type="DNI", doc_number=None, balance_cents=0):
        member = Member(
            full_name=full_name,
            doc_type=doc_type,
            doc_number=doc_number or f"{next(_doc_numbers):08d}Z",
            balance_cents=balance_cents,
        )
        db_session.add(member)
        db_session.commit()
        return member
    return _make


@pytest.fixture(scope='function')
def make_product(db_session):
    def _make(name="Pre-roll", category="ACCESSORY", stock="10", price_cents=1200, **extra):
        product = Product(
            name=name,
            category=category,
            stock_quantity=Decimal(str(stock)),
            price_cents=price_cents,
            **extra,
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def admin_user(db_session):
    return create_staff("admin", "Admin", TEST_PASSWORD, role=Role.ADMIN)


@pytest.fixture(scope='function')
def sales_user(db_session):
    return create_staff("sales", "Sales Desk", TEST_PASSWORD, role=Role.SALES)


@pytest.fixture(scope='function')
def inventory_user(db_session):
    return create_staff("stock", "Stock Room", TEST_PASSWORD, role=Role.INVENTORY)


def get_auth_token(client, username: str, password: str = TEST_PASSWORD) -> str:
    """Helper to get auth token for a staff user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.username))


@pytest.fixture(scope='function')
def sales_headers(client, sales_user):
    return auth_headers(get_auth_token(client, sales_user.username))


@pytest.fixture(scope='function')
def inventory_headers(client, inventory_user):
    return auth_headers(get_auth_token(client, inventory_user.username))
