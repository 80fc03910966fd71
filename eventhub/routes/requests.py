from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.requests import ParticipationRequestOut, RequestStatusUpdate, RequestStatusUpdateResult
from eventhub.services import requests as request_service

router = APIRouter(prefix="/users/{user_id}/requests", tags=["private: requests"])
moderation_router = APIRouter(prefix="/users/{user_id}/events/{event_id}/requests", tags=["private: moderation"])


@router.post("", response_model=ParticipationRequestOut, status_code=status.HTTP_201_CREATED)
def create_request(user_id: int, event_id: int = Query(alias="eventId"), db: Session = Depends(get_db)):
    return request_service.create_request(db, user_id=user_id, event_id=event_id)


@router.get("", response_model=list[ParticipationRequestOut])
def get_user_requests(user_id: int, db: Session = Depends(get_db)):
    return request_service.get_user_requests(db, user_id)


@router.patch("/{request_id}/cancel", response_model=ParticipationRequestOut)
def cancel_request(user_id: int, request_id: int, db: Session = Depends(get_db)):
    return request_service.cancel_request(db, user_id=user_id, request_id=request_id)


@moderation_router.get("", response_model=list[ParticipationRequestOut])
def get_event_requests(user_id: int, event_id: int, db: Session = Depends(get_db)):
    return request_service.get_event_requests(db, user_id=user_id, event_id=event_id)


@moderation_router.patch("", response_model=RequestStatusUpdateResult)
def update_requests_status(user_id: int, event_id: int, payload: RequestStatusUpdate,
                           db: Session = Depends(get_db)):
    return request_service.update_requests_status(
        db,
        user_id=user_id,
        event_id=event_id,
        request_ids=payload.request_ids,
        status=payload.status,
    )
