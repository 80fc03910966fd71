import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.exceptions import NotFoundError
from eventhub.database.transaction import transaction
from eventhub.models.compilations import Compilation
from eventhub.repositories import events as events_repo
from eventhub.schemas.compilations import CompilationOut, NewCompilation, UpdateCompilation
from eventhub.services.enrichment import enrich_short

logger = logging.getLogger(__name__)


def _to_outs(db: Session, compilations: Sequence[Compilation]) -> list[CompilationOut]:
    """Enrich the events of all compilations with one counts query and one stats call."""
    events = list({e.id: e for c in compilations for e in c.events}.values())
    shorts = {dto.id: dto for dto in enrich_short(db, events)}
    return [
        CompilationOut(
            id=c.id,
            title=c.title,
            pinned=c.pinned,
            events=[shorts[e.id] for e in c.events],
        )
        for c in compilations
    ]


def _to_out(db: Session, compilation: Compilation) -> CompilationOut:
    return _to_outs(db, [compilation])[0]


def _get_compilation(db: Session, compilation_id: int) -> Compilation:
    compilation = db.get(Compilation, compilation_id)
    if compilation is None:
        raise NotFoundError(f"Compilation with id={compilation_id} was not found")
    return compilation


def create_compilation(db: Session, payload: NewCompilation) -> CompilationOut:
    with transaction(db):
        compilation = Compilation(
            title=payload.title,
            pinned=payload.pinned,
            events=list(events_repo.find_all_by_id_in(db, list(set(payload.events)))),
        )
        db.add(compilation)
        db.flush()
        compilation_id = compilation.id
    logger.info("Compilation id=%s created", compilation_id)
    return _to_out(db, _get_compilation(db, compilation_id))


def update_compilation(db: Session, compilation_id: int, payload: UpdateCompilation) -> CompilationOut:
    with transaction(db):
        compilation = _get_compilation(db, compilation_id)
        if payload.title is not None:
            compilation.title = payload.title
        if payload.pinned is not None:
            compilation.pinned = payload.pinned
        if payload.events is not None:
            compilation.events = list(events_repo.find_all_by_id_in(db, list(set(payload.events))))
    return _to_out(db, _get_compilation(db, compilation_id))


def delete_compilation(db: Session, compilation_id: int) -> None:
    with transaction(db):
        db.delete(_get_compilation(db, compilation_id))
    logger.info("Compilation id=%s deleted", compilation_id)


def get_compilations(db: Session, pinned: Optional[bool], from_: int, size: int) -> list[CompilationOut]:
    stmt = select(Compilation)
    if pinned is not None:
        stmt = stmt.where(Compilation.pinned == pinned)
    compilations = db.scalars(stmt.order_by(Compilation.id).offset(from_).limit(size)).all()
    return _to_outs(db, compilations)


def get_compilation(db: Session, compilation_id: int) -> CompilationOut:
    return _to_out(db, _get_compilation(db, compilation_id))
