import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.api.products import get_now


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# Every request in the suite is evaluated at this instant
FROZEN_NOW = datetime(2026, 2, 20, 12, 0, tzinfo=timezone.utc)

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_now():
    """Override the request clock for testing."""
    return FROZEN_NOW


# Override the dependencies
app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_now] = override_get_now


@pytest.fixture
def now():
    return FROZEN_NOW


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sample_rows():
    """The six demo products as JSON request bodies."""
    return [
        {"id": "P001", "name": "Apple", "category": "Fruits", "price": 100.0,
         "quantity": 50, "expiryDate": "2026-03-01", "discount": 10.0},
        {"id": "P002", "name": "Banana", "category": "Fruits", "price": 50.0,
         "quantity": 100, "expiryDate": "2026-02-25", "discount": 5.0},
        {"id": "P003", "name": "Milk", "category": "Dairy", "price": 80.0,
         "quantity": 30, "expiryDate": "2026-02-24", "discount": 0.0},
        {"id": "P004", "name": "Cheese", "category": "Dairy", "price": 250.0,
         "quantity": 20, "expiryDate": "2026-04-10", "discount": 15.0},
        {"id": "P005", "name": "Shampoo", "category": "Personal Care", "price": 300.0,
         "quantity": 60, "expiryDate": None, "discount": 20.0},
        {"id": "P006", "name": "Rice", "category": "Grains", "price": 120.0,
         "quantity": 200, "expiryDate": "2027-01-01", "discount": 0.0},
    ]
