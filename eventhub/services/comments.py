import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.exceptions import ConflictError, NotFoundError
from eventhub.database.transaction import transaction
from eventhub.models.comments import Comment
from eventhub.models.events import Event, EventState
from eventhub.models.users import User
from eventhub.schemas.comments import CommentOut, NewComment, UpdateComment

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User with id={user_id} was not found")
    return user


def _get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError(f"Event with id={event_id} was not found")
    return event


def _get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError(f"Comment with id={comment_id} was not found")
    return comment


def _get_own_comment(db: Session, user_id: int, comment_id: int) -> Comment:
    comment = _get_comment(db, comment_id)
    if comment.author_id != user_id:
        logger.warning("User=%s tried to modify comment=%s of user=%s", user_id, comment_id, comment.author_id)
        raise ConflictError("Only the author can change or delete a comment")
    return comment


def add_comment(db: Session, *, user_id: int, event_id: int, payload: NewComment) -> CommentOut:
    with transaction(db):
        author = _get_user(db, user_id)
        event = _get_event(db, event_id)
        if event.state != EventState.PUBLISHED.value:
            logger.warning("Comment on unpublished event=%s", event_id)
            raise ConflictError("Comments can only be added to published events")

        comment = Comment(text=payload.text, author=author, event=event)
        db.add(comment)
        db.flush()
        out = CommentOut.model_validate(comment)
    logger.info("Comment id=%s added to event=%s", out.id, event_id)
    return out


def update_comment(db: Session, *, user_id: int, comment_id: int, payload: UpdateComment) -> CommentOut:
    with transaction(db):
        comment = _get_own_comment(db, user_id, comment_id)
        if payload.text is not None:
            comment.text = payload.text
        db.flush()
        return CommentOut.model_validate(comment)


def delete_comment_by_user(db: Session, *, user_id: int, comment_id: int) -> None:
    with transaction(db):
        db.delete(_get_own_comment(db, user_id, comment_id))
    logger.info("Comment id=%s deleted by author", comment_id)


def delete_comment_by_admin(db: Session, comment_id: int) -> None:
    with transaction(db):
        db.delete(_get_comment(db, comment_id))
    logger.info("Comment id=%s deleted by admin", comment_id)


def get_comments_by_event(db: Session, event_id: int, from_: int, size: int) -> list[CommentOut]:
    _get_event(db, event_id)
    comments = db.scalars(
        select(Comment)
        .where(Comment.event_id == event_id)
        .order_by(Comment.created_on.desc(), Comment.id.desc())
        .offset(from_)
        .limit(size)
    ).all()
    return [CommentOut.model_validate(c) for c in comments]


def get_comments_by_user(db: Session, user_id: int, from_: int, size: int) -> list[CommentOut]:
    _get_user(db, user_id)
    comments = db.scalars(
        select(Comment)
        .where(Comment.author_id == user_id)
        .order_by(Comment.created_on.desc(), Comment.id.desc())
        .offset(from_)
        .limit(size)
    ).all()
    return [CommentOut.model_validate(c) for c in comments]


def get_comment(db: Session, *, event_id: int, comment_id: int) -> CommentOut:
    comment = _get_comment(db, comment_id)
    if comment.event_id != event_id:
        raise NotFoundError(f"Comment with id={comment_id} was not found for event={event_id}")
    return CommentOut.model_validate(comment)
