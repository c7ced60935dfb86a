"""Error taxonomy shared by services and routes; rendered by handlers in app.main."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One failed rule for one field of a request payload."""

    field: str
    message: str


class BlogError(Exception):
    """Base class for errors that map to a client-facing status and message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(BlogError):
    """Request payload broke one or more field rules; nothing was persisted."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        self.errors = list(errors)
        super().__init__(message)


class Unauthorized(BlogError):
    status_code = 401
    default_message = "Access token required"


class TokenExpired(Unauthorized):
    default_message = "Token has expired"


class TokenInvalid(BlogError):
    status_code = 403
    default_message = "Invalid token"


class CredentialError(Unauthorized):
    """Credentials could not be checked (e.g. a malformed stored digest)."""

    default_message = "Invalid credentials"


class AccessDenied(BlogError):
    status_code = 403
    default_message = "Access denied"


class NotFound(BlogError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(BlogError):
    """Unique constraint violation (duplicate username, email, category name, slug)."""

    status_code = 409
    default_message = "Resource already exists"
