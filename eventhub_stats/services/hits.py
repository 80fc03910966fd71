import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from eventhub.core.exceptions import ValidationError
from eventhub.database.transaction import transaction
from eventhub_stats.models.hits import EndpointHit
from eventhub_stats.schemas.hits import EndpointHitIn, EndpointHitOut, ViewStatsOut

logger = logging.getLogger(__name__)


def save_hit(db: Session, payload: EndpointHitIn) -> EndpointHitOut:
    with transaction(db):
        hit = EndpointHit(app=payload.app, uri=payload.uri, ip=payload.ip, timestamp=payload.timestamp)
        db.add(hit)
        db.flush()
        out = EndpointHitOut.model_validate(hit)
    logger.debug("Hit saved id=%s %s %s from %s", out.id, out.app, out.uri, out.ip)
    return out


def get_stats(
    db: Session,
    start: datetime,
    end: datetime,
    uris: Optional[Sequence[str]] = None,
    unique: bool = False,
) -> list[ViewStatsOut]:
    """
    Hits per (app, uri) between start and end, both inclusive.

    With ``unique`` each IP address is counted once per uri. Rows come back
    ordered by hits, most visited first.
    """
    if end < start:
        raise ValidationError("Invalid date range: end must not be before start")

    hits = func.count(distinct(EndpointHit.ip)) if unique else func.count(EndpointHit.id)
    stmt = (
        select(EndpointHit.app, EndpointHit.uri, hits.label("hits"))
        .where(EndpointHit.timestamp >= start, EndpointHit.timestamp <= end)
        .group_by(EndpointHit.app, EndpointHit.uri)
        .order_by(hits.desc(), EndpointHit.uri)
    )
    if uris:
        stmt = stmt.where(EndpointHit.uri.in_(list(uris)))

    return [ViewStatsOut(app=row.app, uri=row.uri, hits=row.hits) for row in db.execute(stmt)]
