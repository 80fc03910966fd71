from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.compilations import CompilationOut, NewCompilation, UpdateCompilation
from eventhub.services import compilations as compilation_service

admin_router = APIRouter(prefix="/admin/compilations", tags=["admin: compilations"])
public_router = APIRouter(prefix="/compilations", tags=["public: compilations"])


@admin_router.post("", response_model=CompilationOut, status_code=status.HTTP_201_CREATED)
def create_compilation(payload: NewCompilation, db: Session = Depends(get_db)):
    return compilation_service.create_compilation(db, payload)


@admin_router.patch("/{comp_id}", response_model=CompilationOut)
def update_compilation(comp_id: int, payload: UpdateCompilation, db: Session = Depends(get_db)):
    return compilation_service.update_compilation(db, comp_id, payload)


@admin_router.delete("/{comp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_compilation(comp_id: int, db: Session = Depends(get_db)) -> None:
    compilation_service.delete_compilation(db, comp_id)


@public_router.get("", response_model=list[CompilationOut])
def get_compilations(
    pinned: Optional[bool] = None,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return compilation_service.get_compilations(db, pinned, from_, size)


@public_router.get("/{comp_id}", response_model=CompilationOut)
def get_compilation(comp_id: int, db: Session = Depends(get_db)):
    return compilation_service.get_compilation(db, comp_id)
