"""Category listing, creation and lookup."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict
from app.models import Category
from app.schemas.category import CategoryCreate, CategoryOut

logger = logging.getLogger(__name__)


def to_category_out(category: Category) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        name=category.name,
        description=category.description,
        created_at=category.created_at,
    )


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def get_category(db: Session, category_id: int) -> Category | None:
    return db.query(Category).filter(Category.id == category_id).first()


def create_category(db: Session, body: CategoryCreate) -> Category:
    """Persist a category. Raises Conflict if the name is taken."""
    if db.query(Category.id).filter(Category.name == body.name).first() is not None:
        raise Conflict("Category already exists")
    category = Category(name=body.name, description=body.description)
    db.add(category)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Category already exists") from e
    db.refresh(category)
    logger.info("Created category id=%s name=%s", category.id, category.name)
    return category
