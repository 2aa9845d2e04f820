"""Shared test fixtures for all test modules."""

import contextlib
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core import database as db_module
from storefront.core.database import Base, get_db
from storefront.main import app
from storefront.repositories.customer_repository import CustomerRepository
from storefront.repositories.item_repository import ItemRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.customer import CustomerCreate
from storefront.schemas.item import ItemCreate
from storefront.schemas.merchant import MerchantCreate

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def merchant(db_session):
    """Create a test merchant."""
    return MerchantRepository(db_session).create(MerchantCreate(name="Schroeder-Jerde"))


@pytest.fixture
def other_merchant(db_session):
    """Create a second test merchant."""
    return MerchantRepository(db_session).create(MerchantCreate(name="Klein, Rempel and Jones"))


@pytest.fixture
def customer(db_session):
    """Create a test customer."""
    return CustomerRepository(db_session).create(
        CustomerCreate(first_name="Joey", last_name="Ondricka")
    )


@pytest.fixture
def item(db_session, merchant):
    """Create an item sold by the test merchant."""
    return ItemRepository(db_session).create(
        ItemCreate(
            name="Item Qui Esse",
            description="Nihil autem sit odio inventore deleniti.",
            unit_price=Decimal("100.00"),
            merchant_id=merchant.id,
        )
    )


@pytest.fixture
def other_item(db_session, other_merchant):
    """Create an item sold by the second test merchant."""
    return ItemRepository(db_session).create(
        ItemCreate(
            name="Item Autem Minima",
            description="Cumque consequuntur ad.",
            unit_price=Decimal("50.00"),
            merchant_id=other_merchant.id,
        )
    )
