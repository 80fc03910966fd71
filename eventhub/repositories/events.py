from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session

from eventhub.models.events import Event, EventState


def find_by_id(db: Session, event_id: int, *, for_update: bool = False) -> Optional[Event]:
    stmt = select(Event).where(Event.id == event_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalar(stmt)


def find_by_initiator_id_and_id(db: Session, initiator_id: int, event_id: int, *,
                                for_update: bool = False) -> Optional[Event]:
    stmt = select(Event).where(Event.id == event_id, Event.initiator_id == initiator_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalar(stmt)


def find_by_id_and_state(db: Session, event_id: int, state: EventState) -> Optional[Event]:
    return db.scalar(select(Event).where(Event.id == event_id, Event.state == state.value))


def find_all_by_initiator_id(db: Session, initiator_id: int, offset: int, limit: int) -> Sequence[Event]:
    return db.scalars(
        select(Event).where(Event.initiator_id == initiator_id).order_by(Event.id).offset(offset).limit(limit)
    ).all()


def find_all_by_id_in(db: Session, ids: list[int]) -> Sequence[Event]:
    if not ids:
        return []
    return db.scalars(select(Event).where(Event.id.in_(ids)).order_by(Event.id)).all()


def exists_by_category_id(db: Session, category_id: int) -> bool:
    return db.scalar(select(Event.id).where(Event.category_id == category_id).limit(1)) is not None


def _apply_range(stmt: Select, range_start: Optional[datetime], range_end: Optional[datetime]) -> Select:
    if range_start is not None:
        stmt = stmt.where(Event.event_date >= range_start)
    if range_end is not None:
        stmt = stmt.where(Event.event_date <= range_end)
    return stmt


def find_all_by_admin_filters(
    db: Session,
    users: Optional[list[int]],
    states: Optional[list[str]],
    categories: Optional[list[int]],
    range_start: Optional[datetime],
    range_end: Optional[datetime],
    offset: int,
    limit: int,
) -> Sequence[Event]:
    stmt = select(Event)
    if users:
        stmt = stmt.where(Event.initiator_id.in_(users))
    if states:
        stmt = stmt.where(Event.state.in_(states))
    if categories:
        stmt = stmt.where(Event.category_id.in_(categories))
    stmt = _apply_range(stmt, range_start, range_end)
    return db.scalars(stmt.order_by(Event.id).offset(offset).limit(limit)).all()


def find_published(
    db: Session,
    text: Optional[str],
    categories: Optional[list[int]],
    paid: Optional[bool],
    range_start: datetime,
    range_end: Optional[datetime],
    order_by_event_date: bool,
) -> Sequence[Event]:
    """Published events matching the public filters, unpaginated."""
    stmt = select(Event).where(Event.state == EventState.PUBLISHED.value)
    if text:
        pattern = f"%{text.lower()}%"
        stmt = stmt.where(or_(Event.annotation.ilike(pattern), Event.description.ilike(pattern)))
    if categories:
        stmt = stmt.where(Event.category_id.in_(categories))
    if paid is not None:
        stmt = stmt.where(Event.paid == paid)
    stmt = _apply_range(stmt, range_start, range_end)
    stmt = stmt.order_by(Event.event_date, Event.id) if order_by_event_date else stmt.order_by(Event.id)
    return db.scalars(stmt).all()
