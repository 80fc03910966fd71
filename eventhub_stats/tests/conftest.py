import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="eventhub-stats-tests-")
os.environ.setdefault("STATS_DATABASE_URL", f"sqlite:///{_TEST_DIR}/stats.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventhub_stats.database.db import Base, SessionLocal, engine
from eventhub_stats.main import app


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db_session() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
