from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.schemas.common import parse_datetime_param
from eventhub_stats.database.db import get_db
from eventhub_stats.schemas.hits import EndpointHitIn, EndpointHitOut, ViewStatsOut
from eventhub_stats.services import hits as hit_service

router = APIRouter(tags=["stats"])


@router.post("/hit", response_model=EndpointHitOut, status_code=status.HTTP_201_CREATED)
def save_hit(payload: EndpointHitIn, db: Session = Depends(get_db)):
    return hit_service.save_hit(db, payload)


@router.get("/stats", response_model=list[ViewStatsOut])
def get_stats(
    start: str,
    end: str,
    uris: Optional[list[str]] = Query(None),
    unique: bool = False,
    db: Session = Depends(get_db),
):
    return hit_service.get_stats(
        db,
        parse_datetime_param("start", start),
        parse_datetime_param("end", end),
        uris,
        unique,
    )
