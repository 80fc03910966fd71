"""
Concurrency tests for the participation limit.

Several callers race for the last seats of an event, both through request
creation and through moderation batches. Whatever the interleaving, the
number of confirmed requests must never exceed the participant limit.
"""
from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventhub.core.exceptions import ConflictError
from eventhub.database.db import SessionLocal
from eventhub.models.requests import RequestStatus
from eventhub.repositories import requests as requests_repo
from eventhub.schemas.requests import ModerationDecision
from eventhub.services.requests import create_request, update_requests_status


def _create_in_own_session(user_id: int, event_id: int) -> str:
    db = SessionLocal()
    try:
        return create_request(db, user_id=user_id, event_id=event_id).status
    except ConflictError:
        return "conflict"
    finally:
        db.close()


def _moderate_in_own_session(owner_id: int, event_id: int, request_ids: list[int]) -> str:
    db = SessionLocal()
    try:
        update_requests_status(
            db, user_id=owner_id, event_id=event_id,
            request_ids=request_ids, status=ModerationDecision.CONFIRMED,
        )
        return "ok"
    except ConflictError:
        return "conflict"
    finally:
        db.close()


def test_concurrent_creation_respects_limit(db_session: Session, make_user, make_event):
    """Ten users race for three seats of an unmoderated event."""
    owner = make_user()
    event = make_event(owner, participant_limit=3, request_moderation=False)
    guests = [make_user().id for _ in range(10)]

    with ThreadPoolExecutor(max_workers=10) as executor:
        futures = [executor.submit(_create_in_own_session, user_id, event.id) for user_id in guests]
        results = [f.result() for f in futures]

    assert results.count(RequestStatus.CONFIRMED.value) == 3
    assert results.count("conflict") == 7
    assert requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.CONFIRMED) == 3


def test_concurrent_moderation_respects_limit(db_session: Session, make_user, make_event, make_request):
    """Three batches each try to fill both seats; only one of them can win."""
    owner = make_user()
    event = make_event(owner, participant_limit=2)
    ids = [make_request(event, make_user()).id for _ in range(6)]
    batches = [ids[0:2], ids[2:4], ids[4:6]]

    with ThreadPoolExecutor(max_workers=3) as executor:
        futures = [executor.submit(_moderate_in_own_session, owner.id, event.id, batch) for batch in batches]
        results = [f.result() for f in futures]

    assert results.count("ok") == 1
    assert results.count("conflict") == 2

    confirmed = requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.CONFIRMED)
    pending = requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.PENDING)
    assert confirmed == 2
    # the winning batch filled the event and closed out everyone else
    assert pending == 0


def test_concurrent_api_requests(client: TestClient, db_session: Session, make_user, make_event):
    """Test concurrent API requests don't confirm past the limit."""
    owner = make_user()
    event = make_event(owner, participant_limit=1, request_moderation=False)
    guests = [make_user().id for _ in range(5)]

    def send(user_id: int) -> int:
        return client.post(f"/users/{user_id}/requests", params={"eventId": event.id}).status_code

    with ThreadPoolExecutor(max_workers=5) as executor:
        codes = list(executor.map(send, guests))

    assert codes.count(201) == 1
    assert codes.count(409) == 4
    assert requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.CONFIRMED) == 1


def test_creation_racing_moderation_respects_limit(db_session: Session, make_user, make_event, make_request):
    """New requests arrive while the initiator confirms batches for the same three seats."""
    owner = make_user()
    event = make_event(owner, participant_limit=3)
    waiting = [make_request(event, make_user()).id for _ in range(6)]
    newcomers = [make_user().id for _ in range(6)]
    batches = [waiting[0:2], waiting[2:4], waiting[4:6]]

    with ThreadPoolExecutor(max_workers=9) as executor:
        moderation = [executor.submit(_moderate_in_own_session, owner.id, event.id, batch) for batch in batches]
        creation = [executor.submit(_create_in_own_session, user_id, event.id) for user_id in newcomers]
        moderation_results = [f.result() for f in moderation]
        creation_results = [f.result() for f in creation]

    # two batches fit (2 seats, then the last seat plus a cascade); the third finds nothing left
    assert moderation_results.count("ok") == 2
    assert moderation_results.count("conflict") == 1
    assert set(creation_results) <= {RequestStatus.PENDING.value, "conflict"}

    confirmed = requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.CONFIRMED)
    pending = requests_repo.count_by_event_id_and_status(db_session, event.id, RequestStatus.PENDING)
    assert confirmed == 3
    # newcomers that got in before the event filled up were closed out by the cascade
    assert pending == 0
