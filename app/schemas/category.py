"""Request/response schemas for categories."""

from datetime import datetime
from typing import Annotated

from app.core.validation import Stripped, length
from app.schemas.common import ApiModel

NAME_MAX_LEN = 50
DESCRIPTION_MAX_LEN = 200


class CategoryCreate(ApiModel):
    name: Annotated[
        str,
        Stripped,
        length(1, NAME_MAX_LEN, message=f"Category name must be between 1 and {NAME_MAX_LEN} characters"),
    ]
    description: Annotated[
        str,
        Stripped,
        length(
            max_len=DESCRIPTION_MAX_LEN,
            message=f"Description cannot exceed {DESCRIPTION_MAX_LEN} characters",
        ),
    ] | None = None


class CategoryOut(ApiModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None
