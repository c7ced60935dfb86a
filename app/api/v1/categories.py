"""Category routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.category import CategoryCreate, CategoryOut
from app.services import categories as category_service

router = APIRouter()


@router.get("", response_model=list[CategoryOut])
def list_categories(
    db: Annotated[Session, Depends(get_db)],
) -> list[CategoryOut]:
    """All categories ordered by name."""
    return [category_service.to_category_out(c) for c in category_service.list_categories(db)]


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CategoryOut:
    """Create a category; the name must be unused (409 otherwise)."""
    category = category_service.create_category(db, body)
    return category_service.to_category_out(category)
