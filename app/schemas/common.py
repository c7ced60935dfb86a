"""Shared schema base and envelopes."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """camelCase on the wire; snake_case names are accepted on input as well."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(ApiModel):
    """Plain acknowledgement."""

    message: str


class FieldErrorItem(ApiModel):
    field: str
    message: str


class ErrorResponse(ApiModel):
    """Body of every non-2xx response."""

    message: str
    errors: list[FieldErrorItem] | None = Field(
        default=None, description="Per-field failures (validation errors only)"
    )


class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_posts: int
    limit: int
    has_next_page: bool
    has_prev_page: bool
