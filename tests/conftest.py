"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from streeteats.backend.app import models  # noqa: F401
from streeteats.backend.app.db import Base, get_db
from streeteats.backend.app.main import app
from streeteats.backend.app.models.vendor import Vendor
from streeteats.backend.app.queue_manager import QueueManager

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def make_vendor(db: Session, **overrides) -> Vendor:
    data = {
        "name": "Taco Express",
        "cuisine": "Mexican",
        "vendor_type": "truck",
        "is_online": True,
        "is_stationary": False,
        "has_fixed_address": True,
    }
    data.update(overrides)
    vendor = Vendor(**data)
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    return vendor


@pytest.fixture
def vendor(db_session: Session) -> Vendor:
    """An online truck vendor."""
    return make_vendor(db_session)


@pytest.fixture
def offline_vendor(db_session: Session) -> Vendor:
    return make_vendor(db_session, name="Burger Bliss", is_online=False)


@pytest.fixture
def closed_cart(db_session: Session) -> Vendor:
    """A pushcart that is online but whose open-until time has passed."""
    return make_vendor(
        db_session,
        name="Elote Cart",
        vendor_type="pushcart",
        is_stationary=True,
        has_fixed_address=False,
        open_until=datetime.now(timezone.utc) - timedelta(minutes=5),
    )


@pytest.fixture
def manager(db_session: Session) -> QueueManager:
    return QueueManager(db_session)
