from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.common import parse_datetime_param
from eventhub.schemas.events import (
    EventFullOut,
    EventShortOut,
    EventSort,
    NewEvent,
    UpdateEventAdminRequest,
    UpdateEventUserRequest,
)
from eventhub.services import events as event_service
from eventhub.tasks import record_hit

private_router = APIRouter(prefix="/users/{user_id}/events", tags=["private: events"])
admin_router = APIRouter(prefix="/admin/events", tags=["admin: events"])
public_router = APIRouter(prefix="/events", tags=["public: events"])


# ---------- Private (initiator) ----------
@private_router.post("", response_model=EventFullOut, status_code=status.HTTP_201_CREATED)
def create_event(user_id: int, payload: NewEvent, db: Session = Depends(get_db)):
    return event_service.create_event(db, user_id=user_id, payload=payload)


@private_router.get("", response_model=list[EventShortOut])
def get_user_events(
    user_id: int,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return event_service.get_user_events(db, user_id, from_, size)


@private_router.get("/{event_id}", response_model=EventFullOut)
def get_user_event(user_id: int, event_id: int, db: Session = Depends(get_db)):
    return event_service.get_user_event(db, user_id=user_id, event_id=event_id)


@private_router.patch("/{event_id}", response_model=EventFullOut)
def update_user_event(user_id: int, event_id: int, payload: UpdateEventUserRequest,
                      db: Session = Depends(get_db)):
    return event_service.update_event_by_initiator(db, user_id=user_id, event_id=event_id, payload=payload)


# ---------- Admin ----------
@admin_router.get("", response_model=list[EventFullOut])
def search_events(
    users: Optional[list[int]] = Query(None),
    states: Optional[list[str]] = Query(None),
    categories: Optional[list[int]] = Query(None),
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return event_service.search_events_for_admin(
        db,
        users,
        states,
        categories,
        parse_datetime_param("rangeStart", range_start),
        parse_datetime_param("rangeEnd", range_end),
        from_,
        size,
    )


@admin_router.patch("/{event_id}", response_model=EventFullOut)
def update_event(event_id: int, payload: UpdateEventAdminRequest, db: Session = Depends(get_db)):
    return event_service.update_event_by_admin(db, event_id, payload)


# ---------- Public ----------
@public_router.get("", response_model=list[EventShortOut])
def get_events(
    request: Request,
    text: Optional[str] = None,
    categories: Optional[list[int]] = Query(None),
    paid: Optional[bool] = None,
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    only_available: bool = Query(False, alias="onlyAvailable"),
    sort: Optional[EventSort] = None,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    events = event_service.get_published_events(
        db,
        text,
        categories,
        paid,
        parse_datetime_param("rangeStart", range_start),
        parse_datetime_param("rangeEnd", range_end),
        only_available,
        sort,
        from_,
        size,
    )
    record_hit(request)
    return events


@public_router.get("/{event_id}", response_model=EventFullOut)
def get_event(event_id: int, request: Request, db: Session = Depends(get_db)):
    event = event_service.get_published_event(db, event_id)
    record_hit(request)
    return event
