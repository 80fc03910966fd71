"""
Event lifecycle.

    PENDING --PUBLISH_EVENT (admin)--> PUBLISHED   (stamps published_on)
    PENDING --REJECT_EVENT (admin)---> CANCELED
    PENDING/CANCELED --SEND_TO_REVIEW / CANCEL_REVIEW (initiator)--> PENDING / CANCELED

Initiators may only edit events that are not published yet.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from eventhub.core.config import MIN_HOURS_BEFORE_EVENT
from eventhub.core.exceptions import ConflictError, NotFoundError, ValidationError
from eventhub.database.transaction import transaction
from eventhub.models.categories import Category
from eventhub.models.events import Event, EventState
from eventhub.models.users import User
from eventhub.repositories import events as events_repo
from eventhub.schemas.common import validate_range
from eventhub.schemas.events import (
    AdminStateAction,
    EventFullOut,
    EventShortOut,
    EventSort,
    NewEvent,
    UpdateEventAdminRequest,
    UpdateEventBase,
    UpdateEventUserRequest,
    UserStateAction,
)
from eventhub.services.enrichment import (
    confirmed_counts,
    enrich_full,
    enrich_short,
    fetch_views,
    to_event_full,
    to_event_short,
)

logger = logging.getLogger(__name__)

# Columns that a partial update may touch directly
_PLAIN_FIELDS = ("annotation", "description", "title", "paid", "participant_limit", "request_moderation")


# ---------- Lifecycle transitions ----------
def apply_admin_action(event: Event, action: Optional[AdminStateAction]) -> None:
    if action is None:
        return
    if action == AdminStateAction.PUBLISH_EVENT:
        if event.state != EventState.PENDING.value:
            logger.warning("Cannot publish event=%s in state %s", event.id, event.state)
            raise ConflictError("Cannot publish the event because it's not in PENDING state")
        event.state = EventState.PUBLISHED.value
        event.published_on = datetime.now()
        logger.info("Event id=%s published", event.id)
    elif action == AdminStateAction.REJECT_EVENT:
        if event.state == EventState.PUBLISHED.value:
            logger.warning("Cannot reject published event=%s", event.id)
            raise ConflictError("Cannot reject the event because it's already published")
        event.state = EventState.CANCELED.value
        logger.info("Event id=%s rejected", event.id)


def apply_user_action(event: Event, action: Optional[UserStateAction]) -> None:
    if action == UserStateAction.SEND_TO_REVIEW:
        event.state = EventState.PENDING.value
    elif action == UserStateAction.CANCEL_REVIEW:
        event.state = EventState.CANCELED.value


# ---------- Helpers ----------
def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User with id={user_id} was not found")
    return user


def _get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError(f"Category with id={category_id} was not found")
    return category


def _check_event_date(event_date: datetime) -> None:
    if event_date < datetime.now() + timedelta(hours=MIN_HOURS_BEFORE_EVENT):
        raise ValidationError(
            f"Event date must be at least {MIN_HOURS_BEFORE_EVENT} hours in the future, got {event_date}"
        )


def _apply_changes(db: Session, event: Event, payload: UpdateEventBase) -> None:
    """Copy the fields present in the payload onto the event."""
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True, exclude={"state_action"})

    nulls = [name for name, value in changes.items() if value is None]
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(sorted(nulls))}")

    for name in _PLAIN_FIELDS:
        if name in changes:
            setattr(event, name, changes[name])
    if "event_date" in changes:
        _check_event_date(payload.event_date)
        event.event_date = payload.event_date
    if "category" in changes:
        event.category = _get_category(db, payload.category)
    if "location" in changes:
        event.location_lat = payload.location.lat
        event.location_lon = payload.location.lon


def _full(db: Session, event: Event) -> EventFullOut:
    return enrich_full(db, [event])[0]


# ---------- Initiator ----------
def create_event(db: Session, *, user_id: int, payload: NewEvent) -> EventFullOut:
    logger.info("User=%s creates event '%s'", user_id, payload.title)
    with transaction(db):
        initiator = _get_user(db, user_id)
        category = _get_category(db, payload.category)
        _check_event_date(payload.event_date)

        event = Event(
            annotation=payload.annotation,
            description=payload.description,
            title=payload.title,
            category=category,
            initiator=initiator,
            event_date=payload.event_date,
            location_lat=payload.location.lat,
            location_lon=payload.location.lon,
            paid=payload.paid,
            participant_limit=payload.participant_limit,
            request_moderation=payload.request_moderation,
            state=EventState.PENDING.value,
        )
        db.add(event)
        db.flush()
        out = to_event_full(event)
    logger.info("Event id=%s created", out.id)
    return out


def get_user_events(db: Session, user_id: int, from_: int, size: int) -> list[EventShortOut]:
    _get_user(db, user_id)
    return enrich_short(db, events_repo.find_all_by_initiator_id(db, user_id, from_, size))


def get_user_event(db: Session, *, user_id: int, event_id: int) -> EventFullOut:
    event = events_repo.find_by_initiator_id_and_id(db, user_id, event_id)
    if event is None:
        raise NotFoundError(f"Event with id={event_id} for user={user_id} was not found")
    return _full(db, event)


def update_event_by_initiator(db: Session, *, user_id: int, event_id: int,
                              payload: UpdateEventUserRequest) -> EventFullOut:
    logger.info("User=%s updates event=%s", user_id, event_id)
    with transaction(db):
        event = events_repo.find_by_initiator_id_and_id(db, user_id, event_id, for_update=True)
        if event is None:
            raise NotFoundError(f"Event with id={event_id} for user={user_id} was not found")
        if event.state not in (EventState.PENDING.value, EventState.CANCELED.value):
            logger.warning("Event=%s in state %s cannot be changed by initiator", event_id, event.state)
            raise ConflictError("Only pending or canceled events can be changed")

        _apply_changes(db, event, payload)
        apply_user_action(event, payload.state_action)
        db.flush()
    return _full(db, event)


# ---------- Admin ----------
def update_event_by_admin(db: Session, event_id: int, payload: UpdateEventAdminRequest) -> EventFullOut:
    logger.info("Admin updates event=%s (action=%s)", event_id, payload.state_action)
    with transaction(db):
        event = events_repo.find_by_id(db, event_id, for_update=True)
        if event is None:
            raise NotFoundError(f"Event with id={event_id} was not found")

        _apply_changes(db, event, payload)
        apply_admin_action(event, payload.state_action)
        db.flush()
    return _full(db, event)


def search_events_for_admin(
    db: Session,
    users: Optional[list[int]],
    states: Optional[list[str]],
    categories: Optional[list[int]],
    range_start: Optional[datetime],
    range_end: Optional[datetime],
    from_: int,
    size: int,
) -> list[EventFullOut]:
    validate_range(range_start, range_end)
    if states:
        unknown = [s for s in states if s not in EventState.__members__]
        if unknown:
            raise ValidationError(f"Unknown event states: {', '.join(unknown)}")
    events = events_repo.find_all_by_admin_filters(
        db, users, states, categories, range_start, range_end, from_, size
    )
    return enrich_full(db, events)


# ---------- Public ----------
def get_published_events(
    db: Session,
    text: Optional[str],
    categories: Optional[list[int]],
    paid: Optional[bool],
    range_start: Optional[datetime],
    range_end: Optional[datetime],
    only_available: bool,
    sort: Optional[EventSort],
    from_: int,
    size: int,
) -> list[EventShortOut]:
    validate_range(range_start, range_end)
    start = range_start or datetime.now()

    events = events_repo.find_published(
        db, text, categories, paid, start, range_end, order_by_event_date=sort == EventSort.EVENT_DATE
    )
    confirmed = confirmed_counts(db, [e.id for e in events])
    if only_available:
        events = [
            e for e in events
            if e.participant_limit == 0 or confirmed.get(e.id, 0) < e.participant_limit
        ]

    if sort == EventSort.VIEWS:
        views = fetch_views(events)
        result = [to_event_short(e, confirmed.get(e.id, 0), views.get(e.id, 0)) for e in events]
        result.sort(key=lambda dto: dto.views, reverse=True)
        return result[from_:from_ + size]

    return enrich_short(db, events[from_:from_ + size], confirmed)


def get_published_event(db: Session, event_id: int) -> EventFullOut:
    event = events_repo.find_by_id_and_state(db, event_id, EventState.PUBLISHED)
    if event is None:
        raise NotFoundError(f"Event with id={event_id} was not found or not published")
    return _full(db, event)
