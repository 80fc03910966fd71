"""
Participation requests: creation, self-cancellation and moderation by the
event initiator.

Everything that reads the confirmed count and then writes runs under the
per-event lock and inside a single transaction.
"""
import logging
from typing import Sequence

from sqlalchemy.orm import Session

from eventhub.core.exceptions import ConflictError, NotFoundError
from eventhub.database.transaction import transaction
from eventhub.models.events import Event, EventState
from eventhub.models.requests import ParticipationRequest, RequestStatus
from eventhub.models.users import User
from eventhub.repositories import events as events_repo
from eventhub.repositories import requests as requests_repo
from eventhub.schemas.requests import (
    ModerationDecision,
    ParticipationRequestOut,
    RequestStatusUpdateResult,
)
from eventhub.services.locking import event_lock

logger = logging.getLogger(__name__)


# ---------- Requester side ----------
def create_request(db: Session, *, user_id: int, event_id: int) -> ParticipationRequestOut:
    logger.info("Creating participation request user=%s event=%s", user_id, event_id)
    with event_lock(event_id):
        with transaction(db):
            return _create_request_in_transaction(db, user_id, event_id)


def _create_request_in_transaction(db: Session, user_id: int, event_id: int) -> ParticipationRequestOut:
    if db.get(User, user_id) is None:
        logger.warning("User id=%s not found", user_id)
        raise NotFoundError(f"User with id={user_id} was not found")

    event = events_repo.find_by_id(db, event_id, for_update=True)
    if event is None:
        logger.warning("Event id=%s not found", event_id)
        raise NotFoundError(f"Event with id={event_id} was not found")

    if event.initiator_id == user_id:
        logger.warning("User=%s is the initiator of event=%s", user_id, event_id)
        raise ConflictError("Initiator cannot request participation in own event")

    if event.state != EventState.PUBLISHED.value:
        logger.warning("Event=%s is not published", event_id)
        raise ConflictError("Cannot participate in unpublished event")

    if requests_repo.exists_active_by_requester_id_and_event_id(db, user_id, event_id):
        logger.warning("Duplicate participation request user=%s event=%s", user_id, event_id)
        raise ConflictError("Duplicate participation request")

    if event.participant_limit > 0:
        confirmed = requests_repo.count_by_event_id_and_status(db, event_id, RequestStatus.CONFIRMED)
        if confirmed >= event.participant_limit:
            logger.warning("Participant limit reached for event=%s", event_id)
            raise ConflictError("Participant limit reached")

    status = RequestStatus.PENDING if event.requires_moderation else RequestStatus.CONFIRMED
    request = requests_repo.save(
        db,
        ParticipationRequest(requester_id=user_id, event_id=event_id, status=status.value),
    )
    logger.info("Participation request id=%s created with status %s", request.id, status.value)
    return ParticipationRequestOut.from_model(request)


def get_user_requests(db: Session, user_id: int) -> list[ParticipationRequestOut]:
    if db.get(User, user_id) is None:
        raise NotFoundError(f"User with id={user_id} was not found")
    return [ParticipationRequestOut.from_model(r) for r in requests_repo.find_all_by_requester_id(db, user_id)]


def cancel_request(db: Session, *, user_id: int, request_id: int) -> ParticipationRequestOut:
    """Requester withdraws a request that is still waiting for moderation."""
    request = requests_repo.find_by_id_and_requester_id(db, request_id, user_id)
    if request is None:
        logger.warning("Request id=%s for user=%s not found", request_id, user_id)
        raise NotFoundError(f"Request with id={request_id} for user={user_id} was not found")
    event_id = request.event_id

    with event_lock(event_id):
        with transaction(db):
            db.refresh(request)
            if request.status != RequestStatus.PENDING.value:
                logger.warning("Request id=%s is %s, cannot cancel", request_id, request.status)
                raise ConflictError("Only pending requests can be canceled")

            request.status = RequestStatus.CANCELED.value
            db.flush()
            logger.info("Request id=%s canceled", request_id)
            return ParticipationRequestOut.from_model(request)


# ---------- Initiator side ----------
def get_event_requests(db: Session, *, user_id: int, event_id: int) -> list[ParticipationRequestOut]:
    if events_repo.find_by_initiator_id_and_id(db, user_id, event_id) is None:
        raise NotFoundError(f"Event with id={event_id} for user={user_id} was not found")
    return [ParticipationRequestOut.from_model(r) for r in requests_repo.find_all_by_event_id(db, event_id)]


def update_requests_status(
    db: Session,
    *,
    user_id: int,
    event_id: int,
    request_ids: Sequence[int],
    status: ModerationDecision,
) -> RequestStatusUpdateResult:
    """
    Confirm or reject a batch of pending requests.

    Confirmation fills free seats in the order the ids were given; the rest of
    the batch is rejected. When the batch takes exactly the remaining seats,
    every other pending request for the event is rejected as well.
    Preconditions are all checked before the first status change, so a
    failed call leaves every request untouched.
    """
    logger.info(
        "Moderating requests %s of event=%s by user=%s -> %s",
        list(request_ids), event_id, user_id, status.value,
    )
    with event_lock(event_id):
        with transaction(db):
            result = _update_requests_status_in_transaction(db, user_id, event_id, request_ids, status)

    logger.info(
        "Moderation of event=%s done: %s confirmed, %s rejected",
        event_id, len(result.confirmed_requests), len(result.rejected_requests),
    )
    return result


def _update_requests_status_in_transaction(
    db: Session,
    user_id: int,
    event_id: int,
    request_ids: Sequence[int],
    status: ModerationDecision,
) -> RequestStatusUpdateResult:
    event = events_repo.find_by_initiator_id_and_id(db, user_id, event_id, for_update=True)
    if event is None:
        logger.warning("Event id=%s for user=%s not found", event_id, user_id)
        raise NotFoundError(f"Event with id={event_id} for user={user_id} was not found")

    if not event.requires_moderation:
        logger.warning("Event=%s does not require moderation", event_id)
        raise ConflictError("No moderation required for this event")

    requests = _resolve_pending_requests(db, event_id, request_ids)
    result = RequestStatusUpdateResult()

    if status == ModerationDecision.CONFIRMED:
        _confirm_requests(db, event, requests, result)
    else:
        _set_status(requests, RequestStatus.REJECTED, result.rejected_requests)
        db.flush()

    return result


def _resolve_pending_requests(db: Session, event_id: int,
                              request_ids: Sequence[int]) -> list[ParticipationRequest]:
    """Load the requests in caller order; all of them must still be pending."""
    ordered_ids = list(dict.fromkeys(request_ids))
    found = {r.id: r for r in requests_repo.find_all_by_event_id_and_id_in(db, event_id, ordered_ids)}

    missing = [request_id for request_id in ordered_ids if request_id not in found]
    if missing:
        logger.warning("Requests %s do not belong to event=%s, ignored", missing, event_id)

    requests = [found[request_id] for request_id in ordered_ids if request_id in found]
    not_pending = [r.id for r in requests if r.status != RequestStatus.PENDING.value]
    if not_pending:
        logger.warning("Requests %s of event=%s are not pending", not_pending, event_id)
        raise ConflictError("Only pending requests can be moderated")
    return requests


def _confirm_requests(db: Session, event: Event, requests: list[ParticipationRequest],
                      result: RequestStatusUpdateResult) -> None:
    confirmed = requests_repo.count_by_event_id_and_status(db, event.id, RequestStatus.CONFIRMED)
    available = event.participant_limit - confirmed
    if available <= 0:
        logger.warning("Participant limit reached for event=%s", event.id)
        raise ConflictError("Participant limit reached")

    to_confirm = min(available, len(requests))
    _set_status(requests[:to_confirm], RequestStatus.CONFIRMED, result.confirmed_requests)
    _set_status(requests[to_confirm:], RequestStatus.REJECTED, result.rejected_requests)
    db.flush()

    if available == to_confirm:
        processed_ids = [r.id for r in requests]
        others = requests_repo.find_pending_by_event_id_excluding(db, event.id, processed_ids)
        if others:
            logger.info("Limit of event=%s reached, rejecting %s other pending requests", event.id, len(others))
        _set_status(others, RequestStatus.REJECTED, result.rejected_requests)
        db.flush()


def _set_status(requests: Sequence[ParticipationRequest], status: RequestStatus,
                out: list[ParticipationRequestOut]) -> None:
    for request in requests:
        request.status = status.value
        out.append(ParticipationRequestOut.from_model(request))
        logger.info("Request id=%s %s", request.id, status.value.lower())
