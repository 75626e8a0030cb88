# tests/conftest.py

"""
Shared fixtures for the Products API tests.
The environment is set before the app is imported so the engine points at a
local SQLite file and the CORS policy has a trusted origin.
"""

import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_products.db")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")
os.environ.setdefault("DB_CONNECT_MAX_RETRIES", "1")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from products_api.db import SessionLocal, engine, get_db, metadata
from products_api.main import app

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)


# --- Pytest Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def setup_database_for_tests():
    # Drop everything first so data left over from an earlier run cannot leak in
    metadata.drop_all(bind=engine)
    metadata.create_all(bind=engine)
    yield
    metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session_for_test():
    """
    Provides a transactional database session for each test function.
    This fixture:
    1. Connects to the database using the main app's engine.
    2. Begins a transaction.
    3. Creates a new session bound to this transaction.
    4. Overrides the app's `get_db` dependency to yield this test session.
    5. Yields the test session to the test function.
    6. Rolls back the transaction and closes the session/connection after the test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    db = SessionLocal(bind=connection)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    try:
        yield db
    finally:
        transaction.rollback()
        db.close()
        connection.close()
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture(scope="module")
def client():
    """
    Provides a TestClient for making HTTP requests to the FastAPI application.
    The TestClient runs the app's startup handlers, which create the tables.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_product(client: TestClient, db_session_for_test: Session):
    """Creates a product through the API and returns its `data` payload."""

    def _create(name="Mouse - Testing", price=50, **extra):
        response = client.post("/api/products", json={"name": name, "price": price, **extra})
        assert response.status_code == 201
        return response.json()["data"]

    return _create
