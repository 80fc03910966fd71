from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from eventhub.database.db import get_db
from eventhub.schemas.comments import CommentOut, NewComment, UpdateComment
from eventhub.services import comments as comment_service
from eventhub.tasks import record_hit

private_router = APIRouter(prefix="/users/{user_id}/comments", tags=["private: comments"])
public_router = APIRouter(prefix="/events/{event_id}/comments", tags=["public: comments"])
admin_router = APIRouter(prefix="/admin/comments", tags=["admin: comments"])


@private_router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    user_id: int,
    payload: NewComment,
    event_id: int = Query(alias="eventId"),
    db: Session = Depends(get_db),
):
    return comment_service.add_comment(db, user_id=user_id, event_id=event_id, payload=payload)


@private_router.patch("/{comment_id}", response_model=CommentOut)
def update_comment(user_id: int, comment_id: int, payload: UpdateComment, db: Session = Depends(get_db)):
    return comment_service.update_comment(db, user_id=user_id, comment_id=comment_id, payload=payload)


@private_router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_own_comment(user_id: int, comment_id: int, db: Session = Depends(get_db)) -> None:
    comment_service.delete_comment_by_user(db, user_id=user_id, comment_id=comment_id)


@private_router.get("", response_model=list[CommentOut])
def get_my_comments(
    user_id: int,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    return comment_service.get_comments_by_user(db, user_id, from_, size)


@public_router.get("", response_model=list[CommentOut])
def get_event_comments(
    event_id: int,
    request: Request,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db),
):
    record_hit(request)
    return comment_service.get_comments_by_event(db, event_id, from_, size)


@public_router.get("/{comment_id}", response_model=CommentOut)
def get_event_comment(event_id: int, comment_id: int, request: Request, db: Session = Depends(get_db)):
    record_hit(request)
    return comment_service.get_comment(db, event_id=event_id, comment_id=comment_id)


@admin_router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, db: Session = Depends(get_db)) -> None:
    comment_service.delete_comment_by_admin(db, comment_id)
