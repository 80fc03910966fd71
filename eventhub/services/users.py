import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.exceptions import ConflictError, NotFoundError
from eventhub.database.transaction import transaction
from eventhub.models.users import User
from eventhub.schemas.users import NewUserRequest, UserOut

logger = logging.getLogger(__name__)


def create_user(db: Session, payload: NewUserRequest) -> UserOut:
    with transaction(db):
        if db.scalar(select(User.id).where(User.email == payload.email)) is not None:
            logger.warning("User with email %s already exists", payload.email)
            raise ConflictError(f"User with email={payload.email} already exists")
        user = User(name=payload.name, email=payload.email)
        db.add(user)
        db.flush()
        out = UserOut.model_validate(user)
    logger.info("User id=%s created", out.id)
    return out


def get_users(db: Session, ids: Optional[list[int]], from_: int, size: int) -> list[UserOut]:
    stmt = select(User)
    if ids:
        stmt = stmt.where(User.id.in_(ids))
    users = db.scalars(stmt.order_by(User.id).offset(from_).limit(size)).all()
    return [UserOut.model_validate(u) for u in users]


def delete_user(db: Session, user_id: int) -> None:
    with transaction(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User with id={user_id} was not found")
        db.delete(user)
    logger.info("User id=%s deleted", user_id)
