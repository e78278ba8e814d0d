"""
Pytest fixtures for dukapos backend tests.

Provides the test app and database, role-specific accounts, two merchant
businesses for isolation checks, and Bearer-token helpers.
"""

import pytest

from dukapos import create_app
from dukapos.extensions import db
from dukapos.models import Business, Category, Customer, Product
from dukapos.permissions import Role
from dukapos.services import session_service
from dukapos.services.user_service import provision_user


DEFAULT_PASSWORD = "password123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'SUPER_ADMIN_BOOTSTRAP': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_user(db_session):
    """
    Factory for accounts of any role.

    make_user(Role.MERCHANT, "+255711000001", business_name="Shop") also
    creates the merchant's business.
    """
    def _make(role, phone, *, full_name=None, password=DEFAULT_PASSWORD, business_name=None, status=None, email=None):
        patch = {
            "full_name": full_name or f"{role.value.title()} {phone[-4:]}",
            "phone_number": phone,
        }
        if business_name:
            patch["business_name"] = business_name
        if status:
            patch["status"] = status
        if email:
            patch["email"] = email
        return provision_user(patch=patch, role=role, password=password, created_by_id=None)

    return _make


@pytest.fixture(scope='function')
def super_admin(make_user):
    return make_user(Role.SUPER_ADMIN, "+255700000000", full_name="Super Admin")


@pytest.fixture(scope='function')
def app_staff(make_user):
    return make_user(Role.APP_STAFF, "+255700000001", full_name="Staff One")


@pytest.fixture(scope='function')
def sponsor(make_user):
    return make_user(Role.SPONSOR, "+255700000002", full_name="Sponsor One")


@pytest.fixture(scope='function')
def merchant_a(make_user):
    """Merchant owning Business A."""
    return make_user(Role.MERCHANT, "+255711000001", full_name="Asha", business_name="Asha Shop")


@pytest.fixture(scope='function')
def merchant_b(make_user):
    """Merchant owning Business B."""
    return make_user(Role.MERCHANT, "+255711000002", full_name="Baraka", business_name="Baraka Store")


@pytest.fixture(scope='function')
def business_a(db_session, merchant_a):
    return db_session.query(Business).filter_by(owner_id=merchant_a.id).one()


@pytest.fixture(scope='function')
def business_b(db_session, merchant_b):
    return db_session.query(Business).filter_by(owner_id=merchant_b.id).one()


@pytest.fixture(scope='function')
def category_a(db_session, business_a):
    category = Category(business_id=business_a.id, name="Drinks")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope='function')
def product_a(db_session, business_a):
    """Physical product in Business A: 10.00 each, 10 in stock."""
    product = Product(
        business_id=business_a.id,
        name="Soda",
        type="product",
        price_cents=1000,
        stock_quantity=10,
        min_stock_level=2,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def service_a(db_session, business_a):
    """Service in Business A: 25.00, no stock."""
    product = Product(
        business_id=business_a.id,
        name="Delivery",
        type="service",
        price_cents=2500,
        stock_quantity=0,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def product_b(db_session, business_b):
    """Physical product in Business B."""
    product = Product(
        business_id=business_b.id,
        name="Bread",
        type="product",
        price_cents=2000,
        stock_quantity=5,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def customer_a(db_session, business_a):
    customer = Customer(business_id=business_a.id, name="Neema", phone_number="+255722000001")
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def customer_b(db_session, business_b):
    customer = Customer(business_id=business_b.id, name="Juma")
    db_session.add(customer)
    db_session.commit()
    return customer


def auth_headers_for(user) -> dict:
    """Open a session for the user and return Bearer headers."""
    token, _ = session_service.create_session(user_id=user.id)
    return auth_headers(token)


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def get_auth_token(client, phone_number: str, password: str = DEFAULT_PASSWORD):
    """Helper to log in over HTTP and return the session token."""
    response = client.post('/api/auth/login', json={
        'phone_number': phone_number,
        'password': password,
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


@pytest.fixture(scope='function')
def super_admin_headers(super_admin):
    return auth_headers_for(super_admin)


@pytest.fixture(scope='function')
def app_staff_headers(app_staff):
    return auth_headers_for(app_staff)


@pytest.fixture(scope='function')
def sponsor_headers(sponsor):
    return auth_headers_for(sponsor)


@pytest.fixture(scope='function')
def merchant_a_headers(merchant_a):
    return auth_headers_for(merchant_a)


@pytest.fixture(scope='function')
def merchant_b_headers(merchant_b):
    return auth_headers_for(merchant_b)
