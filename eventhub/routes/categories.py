from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.categories import CategoryOut, CategoryUpdate, NewCategory
from eventhub.services import categories as category_service
from eventhub.tasks import record_hit

admin_router = APIRouter(prefix="/admin/categories", tags=["admin: categories"])
public_router = APIRouter(prefix="/categories", tags=["public: categories"])


@admin_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def add_category(payload: NewCategory, db: Session = Depends(get_db)):
    return category_service.add_category(db, payload)


@admin_router.patch("/{cat_id}", response_model=CategoryOut)
def update_category(cat_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return category_service.update_category(db, cat_id, payload)


@admin_router.delete("/{cat_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(cat_id: int, db: Session = Depends(get_db)) -> None:
    category_service.delete_category(db, cat_id)


@public_router.get("", response_model=list[CategoryOut])
def get_categories(
    request: Request,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    record_hit(request)
    return category_service.get_categories(db, from_, size)


@public_router.get("/{cat_id}", response_model=CategoryOut)
def get_category(cat_id: int, request: Request, db: Session = Depends(get_db)):
    record_hit(request)
    return category_service.get_category(db, cat_id)
