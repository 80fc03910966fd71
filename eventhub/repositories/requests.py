from typing import Iterable, Optional, Sequence

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session

from eventhub.models.requests import ParticipationRequest, RequestStatus


def count_by_event_id_and_status(db: Session, event_id: int, status: RequestStatus) -> int:
    count = db.scalar(
        select(func.count(ParticipationRequest.id)).where(
            ParticipationRequest.event_id == event_id,
            ParticipationRequest.status == status.value,
        )
    )
    return int(count or 0)


def count_confirmed_by_event_ids(db: Session, event_ids: Iterable[int]) -> dict[int, int]:
    event_ids = list(event_ids)
    if not event_ids:
        return {}
    rows = db.execute(
        select(ParticipationRequest.event_id, func.count(ParticipationRequest.id))
        .where(
            ParticipationRequest.event_id.in_(event_ids),
            ParticipationRequest.status == RequestStatus.CONFIRMED.value,
        )
        .group_by(ParticipationRequest.event_id)
    ).all()
    return {event_id: int(count) for event_id, count in rows}


def exists_active_by_requester_id_and_event_id(db: Session, requester_id: int, event_id: int) -> bool:
    """True when the user already holds a request for the event that was not canceled."""
    return bool(
        db.scalar(
            select(
                exists().where(
                    ParticipationRequest.requester_id == requester_id,
                    ParticipationRequest.event_id == event_id,
                    ParticipationRequest.status != RequestStatus.CANCELED.value,
                )
            )
        )
    )


def find_by_id_and_requester_id(db: Session, request_id: int, requester_id: int) -> Optional[ParticipationRequest]:
    return db.scalar(
        select(ParticipationRequest).where(
            ParticipationRequest.id == request_id,
            ParticipationRequest.requester_id == requester_id,
        )
    )


def find_all_by_requester_id(db: Session, requester_id: int) -> Sequence[ParticipationRequest]:
    return db.scalars(
        select(ParticipationRequest)
        .where(ParticipationRequest.requester_id == requester_id)
        .order_by(ParticipationRequest.id)
    ).all()


def find_all_by_event_id(db: Session, event_id: int) -> Sequence[ParticipationRequest]:
    return db.scalars(
        select(ParticipationRequest)
        .where(ParticipationRequest.event_id == event_id)
        .order_by(ParticipationRequest.id)
    ).all()


def find_all_by_event_id_and_id_in(db: Session, event_id: int, ids: Iterable[int]) -> Sequence[ParticipationRequest]:
    return db.scalars(
        select(ParticipationRequest).where(
            ParticipationRequest.event_id == event_id,
            ParticipationRequest.id.in_(list(ids)),
        )
    ).all()


def find_pending_by_event_id_excluding(db: Session, event_id: int,
                                       excluded_ids: Iterable[int]) -> Sequence[ParticipationRequest]:
    stmt = select(ParticipationRequest).where(
        ParticipationRequest.event_id == event_id,
        ParticipationRequest.status == RequestStatus.PENDING.value,
    )
    excluded_ids = list(excluded_ids)
    if excluded_ids:
        stmt = stmt.where(ParticipationRequest.id.not_in(excluded_ids))
    return db.scalars(stmt.order_by(ParticipationRequest.id)).all()


def save(db: Session, request: ParticipationRequest) -> ParticipationRequest:
    db.add(request)
    db.flush()  # assigns id and defaults
    return request
