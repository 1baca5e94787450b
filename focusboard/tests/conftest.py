"""
Shared fixtures: an in-memory SQLite database per test, seeded trophies and
an authenticated API client.
"""
import os

os.environ.setdefault("FOCUSBOARD_DATABASE_URL", "sqlite://")
os.environ.setdefault("FOCUSBOARD_LOG_DIR", "./logs")
os.environ.setdefault("FOCUSBOARD_CRON_SECRET", "test-cron-secret")
os.environ["FOCUSBOARD_SCHEDULER_ENABLED"] = "false"

import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from focusboard.database import Base, enable_sqlite_savepoints, get_db
from focusboard import models  # noqa: F401
from focusboard.constants import API_KEY

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_savepoints(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user_id():
    return "user-1"


@pytest.fixture
def other_user_id():
    return "user-2"


@pytest.fixture
def today():
    return date(2026, 3, 11)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def seeded_trophies(db_session):
    from focusboard.seed import seed_trophies
    seed_trophies(db_session)
    return db_session


@pytest.fixture
def client(db_session):
    """TestClient bound to the test session"""
    from fastapi.testclient import TestClient
    from focusboard.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user_id):
    return {"X-API-Key": API_KEY, "X-User-Id": user_id, "X-Timezone": "UTC"}
