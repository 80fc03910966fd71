from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.users import NewUserRequest, UserOut
from eventhub.services import users as user_service

admin_router = APIRouter(prefix="/admin/users", tags=["admin: users"])


@admin_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: NewUserRequest, db: Session = Depends(get_db)):
    return user_service.create_user(db, payload)


@admin_router.get("", response_model=list[UserOut])
def get_users(
    ids: Optional[list[int]] = Query(None),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return user_service.get_users(db, ids, from_, size)


@admin_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)) -> None:
    user_service.delete_user(db, user_id)
