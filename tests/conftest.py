"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch
the real database. Tables are created before and dropped
after every test, so no test data persists.
"""

import os

# Must be set before booking_ledger is imported: the engine
# is created from DATABASE_URL at import time.
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from booking_ledger.main import app
from booking_ledger.models.base import Base, get_db
from booking_ledger.models.enums import AccountType
from booking_ledger.schemas.account import AccountCreate, TenantCreate
from booking_ledger.services.account_service import AccountService
from booking_ledger.services.tenant_service import TenantService
from booking_ledger.tenancy import TenantContext


engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# SKR03 accounts used across the tests
CHART = [
    ("0800", "Gezeichnetes Kapital", AccountType.EQUITY),
    ("1000", "Kasse", AccountType.ASSET),
    ("1200", "Bank", AccountType.ASSET),
    ("1576", "Abziehbare Vorsteuer 19%", AccountType.ASSET),
    ("1776", "Umsatzsteuer 19%", AccountType.LIABILITY),
    ("4930", "Bürobedarf", AccountType.EXPENSE),
    ("8400", "Erlöse 19% USt", AccountType.REVENUE),
]


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """For tests that need a second, concurrent session."""
    return TestSessionLocal


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app and the
    test share one session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_tenant(db_session, name, slug):
    tenant = TenantService(db_session).create_tenant(
        TenantCreate(name=name, slug=slug)
    )
    db_session.commit()
    return tenant


def make_chart(db_session, ctx):
    """Create the test chart of accounts, keyed by code."""
    service = AccountService(db_session)
    accounts = {
        code: service.create_account(ctx, AccountCreate(
            code=code, name=name, account_type=account_type,
        ))
        for code, name, account_type in CHART
    }
    db_session.commit()
    return accounts


@pytest.fixture
def tenant(db_session):
    return make_tenant(db_session, "Muster GmbH", "muster")


@pytest.fixture
def ctx(tenant):
    return TenantContext(tenant_id=tenant.id, user_id=7)


@pytest.fixture
def other_ctx(db_session):
    """A second, unrelated tenant."""
    other = make_tenant(db_session, "Beispiel AG", "beispiel")
    return TenantContext(tenant_id=other.id, user_id=9)


@pytest.fixture
def accounts(db_session, ctx):
    return make_chart(db_session, ctx)


@pytest.fixture
def headers(ctx):
    return {"X-Tenant-ID": str(ctx.tenant_id), "X-User-ID": str(ctx.user_id)}
