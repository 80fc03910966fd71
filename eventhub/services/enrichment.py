"""Build event output shapes with confirmed-request counts and view counts."""
import logging
import re
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from eventhub.clients.stats import get_stats_client
from eventhub.models.events import Event
from eventhub.repositories import requests as requests_repo
from eventhub.schemas.categories import CategoryOut
from eventhub.schemas.events import EventFullOut, EventShortOut, Location
from eventhub.schemas.users import UserShortOut

logger = logging.getLogger(__name__)

EVENT_URI_PATTERN = re.compile(r"^/events/(\d+)$")
DISTANT_PAST = datetime(1970, 1, 1)


def event_uri(event_id: int) -> str:
    return f"/events/{event_id}"


def confirmed_counts(db: Session, event_ids: Iterable[int]) -> dict[int, int]:
    return requests_repo.count_confirmed_by_event_ids(db, event_ids)


def fetch_views(events: Sequence[Event]) -> dict[int, int]:
    """Unique-IP views per event id; empty when the stats service is unreachable."""
    published = [e for e in events if e.published_on is not None]
    if not published:
        return {}

    start = min(e.published_on for e in published)
    uris = [event_uri(e.id) for e in published]
    try:
        stats = get_stats_client().get_stats(start, datetime.now(), uris, unique=True)
    except Exception as e:
        logger.warning("Failed to get stats for %s events: %s", len(uris), e)
        return {}

    views: dict[int, int] = {}
    for item in stats:
        match = EVENT_URI_PATTERN.match(item.uri)
        if match:
            views[int(match.group(1))] = item.hits
    return views


def to_event_short(event: Event, confirmed: int = 0, views: int = 0) -> EventShortOut:
    return EventShortOut(
        id=event.id,
        annotation=event.annotation,
        category=CategoryOut.model_validate(event.category),
        confirmed_requests=confirmed,
        event_date=event.event_date,
        initiator=UserShortOut.model_validate(event.initiator),
        paid=event.paid,
        title=event.title,
        views=views,
    )


def to_event_full(event: Event, confirmed: int = 0, views: int = 0) -> EventFullOut:
    return EventFullOut(
        id=event.id,
        annotation=event.annotation,
        category=CategoryOut.model_validate(event.category),
        confirmed_requests=confirmed,
        created_on=event.created_on,
        description=event.description,
        event_date=event.event_date,
        initiator=UserShortOut.model_validate(event.initiator),
        location=Location(lat=event.location_lat, lon=event.location_lon),
        paid=event.paid,
        participant_limit=event.participant_limit,
        published_on=event.published_on,
        request_moderation=event.request_moderation,
        state=event.state,
        title=event.title,
        views=views,
    )


def enrich_full(db: Session, events: Sequence[Event],
                confirmed: Optional[dict[int, int]] = None) -> list[EventFullOut]:
    confirmed = confirmed if confirmed is not None else confirmed_counts(db, [e.id for e in events])
    views = fetch_views(events)
    return [to_event_full(e, confirmed.get(e.id, 0), views.get(e.id, 0)) for e in events]


def enrich_short(db: Session, events: Sequence[Event],
                 confirmed: Optional[dict[int, int]] = None) -> list[EventShortOut]:
    confirmed = confirmed if confirmed is not None else confirmed_counts(db, [e.id for e in events])
    views = fetch_views(events)
    return [to_event_short(e, confirmed.get(e.id, 0), views.get(e.id, 0)) for e in events]
