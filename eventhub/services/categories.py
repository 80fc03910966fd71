import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.core.exceptions import ConflictError, NotFoundError
from eventhub.database.transaction import transaction
from eventhub.models.categories import Category
from eventhub.repositories import events as events_repo
from eventhub.schemas.categories import CategoryOut, CategoryUpdate, NewCategory

logger = logging.getLogger(__name__)


def _get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError(f"Category with id={category_id} was not found")
    return category


def _name_taken(db: Session, name: str) -> bool:
    return db.scalar(select(Category.id).where(Category.name == name)) is not None


def add_category(db: Session, payload: NewCategory) -> CategoryOut:
    with transaction(db):
        if _name_taken(db, payload.name):
            raise ConflictError(f"Category with name '{payload.name}' already exists")
        category = Category(name=payload.name)
        db.add(category)
        db.flush()
        out = CategoryOut.model_validate(category)
    logger.info("Category id=%s created", out.id)
    return out


def update_category(db: Session, category_id: int, payload: CategoryUpdate) -> CategoryOut:
    with transaction(db):
        category = _get_category(db, category_id)
        if payload.name != category.name and _name_taken(db, payload.name):
            raise ConflictError(f"Category with name '{payload.name}' already exists")
        category.name = payload.name
        db.flush()
        return CategoryOut.model_validate(category)


def delete_category(db: Session, category_id: int) -> None:
    with transaction(db):
        category = _get_category(db, category_id)
        if events_repo.exists_by_category_id(db, category_id):
            raise ConflictError("The category is not empty")
        db.delete(category)
    logger.info("Category id=%s deleted", category_id)


def get_categories(db: Session, from_: int, size: int) -> list[CategoryOut]:
    categories = db.scalars(select(Category).order_by(Category.id).offset(from_).limit(size)).all()
    return [CategoryOut.model_validate(c) for c in categories]


def get_category(db: Session, category_id: int) -> CategoryOut:
    return CategoryOut.model_validate(_get_category(db, category_id))
