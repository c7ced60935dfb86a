"""
Declarative field rules and aggregated validation reports.

Rules are pydantic validators carrying their own client-facing message, composed
with Annotated into request models (see app.schemas). A field stops at its first
failing rule; every field is still evaluated, so one report lists all bad fields.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)
from pydantic_core import PydanticCustomError

from app.core.errors import FieldError, ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)

# FastAPI prefixes error locations with where the value came from.
REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})

Stripped = StringConstraints(strip_whitespace=True)


def required(message: str) -> AfterValidator:
    """Value must be non-empty (after whitespace stripping)."""

    def check(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value):
            raise PydanticCustomError("required", message)
        return value

    return AfterValidator(check)


def length(min_len: int | None = None, max_len: int | None = None, *, message: str) -> AfterValidator:
    """len(value) within [min_len, max_len]; either bound may be omitted."""

    def check(value: Any) -> Any:
        n = len(value)
        if (min_len is not None and n < min_len) or (max_len is not None and n > max_len):
            raise PydanticCustomError("length", message)
        return value

    return AfterValidator(check)


def one_of(choices: Iterable[str], *, message: str) -> AfterValidator:
    """Value must be one of choices."""
    allowed = frozenset(choices)

    def check(value: Any) -> Any:
        if value not in allowed:
            raise PydanticCustomError("one_of", message)
        return value

    return AfterValidator(check)


_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def email_address(message: str) -> AfterValidator:
    """Value must be a syntactically valid address (email-validator, no DNS lookup)."""

    def check(value: Any) -> Any:
        try:
            return _EMAIL_ADAPTER.validate_python(value)
        except ValidationError as e:
            raise PydanticCustomError("email", message) from e

    return AfterValidator(check)


def is_id_text(value: str) -> bool:
    """True for a plain ASCII digit string (str.isdigit also accepts superscripts)."""
    return value.isascii() and value.isdecimal()


def reference_id(message: str) -> BeforeValidator:
    """Value must look like a row id: a positive integer or a string of digits."""

    def check(value: Any) -> Any:
        if isinstance(value, bool):
            raise PydanticCustomError("reference_id", message)
        if isinstance(value, int) and value > 0:
            return value
        if isinstance(value, str) and is_id_text(value.strip()) and int(value) > 0:
            return int(value)
        raise PydanticCustomError("reference_id", message)

    return BeforeValidator(check)


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def collect_errors(raw_errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Convert pydantic/FastAPI error dicts into an ordered FieldError report."""
    report: list[FieldError] = []
    for err in raw_errors:
        if err.get("type") == "json_invalid":
            report.append(FieldError(field="body", message="Request body is not valid JSON"))
            continue
        field = _field_name(err.get("loc", ()))
        if err.get("type") == "missing":
            message = f"{field} is required" if field else "Request body is required"
        else:
            message = str(err.get("msg", "Invalid value"))
        report.append(FieldError(field=field or "body", message=message))
    return report


def run_validation(model: type[ModelT], payload: Any) -> ModelT:
    """Validate payload against model; raise ValidationFailed with every field error."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(collect_errors(e.errors())) from e
