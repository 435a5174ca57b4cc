import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sales_portal.constants import Role, DEFAULT_ROLE_PERMISSIONS
from sales_portal.core.identity import Identity
from sales_portal.core.models import Base
from sales_portal.data import crud_users

TEST_PASSWORD = "secret123"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _create_user(db, login_id, role, display_name=None, permissions=None, is_active=True):
    user = crud_users.create_user(
        db, login_id, TEST_PASSWORD, display_name or login_id.title(), f"{login_id}@example.com",
        role.value, permissions if permissions is not None else DEFAULT_ROLE_PERMISSIONS[role],
    )
    if not is_active:
        user = crud_users.set_user_active(db, user.id, False)
    return user


@pytest.fixture
def admin_user(db_session):
    return _create_user(db_session, "admin001", Role.ADMIN, "Asha Admin")


@pytest.fixture
def sales_user(db_session):
    return _create_user(db_session, "sales001", Role.SALES, "Sam Sales")


@pytest.fixture
def other_sales_user(db_session):
    return _create_user(db_session, "sales002", Role.SALES, "Rita Rep")


@pytest.fixture
def distributor_user(db_session):
    return _create_user(db_session, "dist_north_01", Role.DISTRIBUTOR, "North Distribution")


@pytest.fixture
def admin_identity(admin_user):
    return Identity.from_user(admin_user)


@pytest.fixture
def sales_identity(sales_user):
    return Identity.from_user(sales_user)


@pytest.fixture
def other_sales_identity(other_sales_user):
    return Identity.from_user(other_sales_user)


@pytest.fixture
def distributor_identity(distributor_user):
    return Identity.from_user(distributor_user)


def make_identity(role=Role.SALES, permissions=(), is_active=True, login_id="user001"):
    return Identity(
        login_id=login_id,
        display_name=login_id.title(),
        email=f"{login_id}@example.com",
        role=role,
        permissions=frozenset(permissions),
        is_active=is_active,
    )


@pytest.fixture
def valid_lead_data():
    return {
        "optician_name": "Clear Vision Opticals",
        "contact_person_name": "Rajesh Kumar",
        "phone_number": "+91 98765 43210",
        "email": "rajesh@clearvision.in",
        "address": "12 MG Road, Bengaluru",
        "gst_number": "29ABCDE1234F1Z5",
        "week_off": "Sunday",
        "business_type": "independent",
        "source": "referral",
        "priority": "high",
        "monthly_volume": "120",
        "current_suppliers": "Essilor, Zeiss",
        "notes": "Interested in progressive lenses",
    }

