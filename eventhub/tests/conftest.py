import itertools
import os
import tempfile
from datetime import datetime, timedelta

# Point both services at throwaway SQLite files before their engines are built
_TEST_DIR = tempfile.mkdtemp(prefix="eventhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/eventhub.db"
os.environ["STATS_DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/stats.db"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventhub.clients.stats import StatsClient
from eventhub.core.celery_config import celery_app
from eventhub.database.db import Base, SessionLocal, engine
from eventhub.main import app
from eventhub.models.categories import Category
from eventhub.models.events import Event, EventState
from eventhub.models.requests import ParticipationRequest, RequestStatus
from eventhub.models.users import User
from eventhub_stats.database.db import Base as StatsBase
from eventhub_stats.database.db import engine as stats_engine
from eventhub_stats.main import app as stats_app


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    StatsBase.metadata.create_all(bind=stats_engine)
    celery_app.conf.task_always_eager = True
    yield
    Base.metadata.drop_all(bind=engine)
    StatsBase.metadata.drop_all(bind=stats_engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    for metadata, bind in ((Base.metadata, engine), (StatsBase.metadata, stats_engine)):
        with bind.begin() as conn:
            for table in reversed(metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def redis_client(monkeypatch: pytest.MonkeyPatch, fake_redis):
    """Route the per-event lock through an in-process Redis."""
    monkeypatch.setattr("eventhub.services.locking.get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture
def stats_http():
    with TestClient(stats_app) as http:
        yield http


@pytest.fixture(autouse=True)
def stats_client(monkeypatch: pytest.MonkeyPatch, stats_http: TestClient) -> StatsClient:
    """Serve stats calls from the stats app in-process."""
    client = StatsClient(client=stats_http)
    monkeypatch.setattr("eventhub.services.enrichment.get_stats_client", lambda: client)
    monkeypatch.setattr("eventhub.tasks.get_stats_client", lambda: client)
    return client


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


# ---------- Factories ----------
_seq = itertools.count(1)


@pytest.fixture
def make_user(db_session: Session):
    def _make(name: str | None = None) -> User:
        n = next(_seq)
        user = User(name=name or f"user{n}", email=f"user{n}@example.com")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def category(db_session: Session) -> Category:
    cat = Category(name=f"Concerts {next(_seq)}")
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture
def make_event(db_session: Session, category: Category):
    def _make(
        initiator: User,
        *,
        participant_limit: int = 0,
        request_moderation: bool = True,
        state: EventState = EventState.PUBLISHED,
        title: str = "Open air",
        paid: bool = False,
        event_date: datetime | None = None,
    ) -> Event:
        event = Event(
            annotation="A long enough annotation for the event",
            description="A long enough description for the event",
            title=title,
            category_id=category.id,
            initiator_id=initiator.id,
            event_date=event_date or datetime.now() + timedelta(days=7),
            published_on=datetime.now() - timedelta(hours=1) if state == EventState.PUBLISHED else None,
            location_lat=55.75,
            location_lon=37.62,
            paid=paid,
            participant_limit=participant_limit,
            request_moderation=request_moderation,
            state=state.value,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture
def make_request(db_session: Session):
    def _make(event: Event, requester: User, status: RequestStatus = RequestStatus.PENDING) -> ParticipationRequest:
        request = ParticipationRequest(event_id=event.id, requester_id=requester.id, status=status.value)
        db_session.add(request)
        db_session.commit()
        db_session.refresh(request)
        return request

    return _make
