"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints

from app.core.validation import Stripped, email_address, length, required
from app.schemas.common import ApiModel

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
NAME_MAX_LEN = 50
BIO_MAX_LEN = 500
EMAIL_MAX_LEN = 255
IMAGE_URL_MAX_LEN = 1024

Username = Annotated[
    str,
    Stripped,
    required("Username is required"),
    length(
        USERNAME_MIN_LEN,
        USERNAME_MAX_LEN,
        message=f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters",
    ),
]
Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True),
    required("Email is required"),
    length(max_len=EMAIL_MAX_LEN, message=f"Email cannot exceed {EMAIL_MAX_LEN} characters"),
    email_address("Please enter a valid email"),
]
Password = Annotated[
    str,
    length(
        PASSWORD_MIN_LEN,
        PASSWORD_MAX_LEN,
        message=f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters",
    ),
]
FirstName = Annotated[
    str,
    Stripped,
    required("First name is required"),
    length(max_len=NAME_MAX_LEN, message=f"First name cannot exceed {NAME_MAX_LEN} characters"),
]
LastName = Annotated[
    str,
    Stripped,
    required("Last name is required"),
    length(max_len=NAME_MAX_LEN, message=f"Last name cannot exceed {NAME_MAX_LEN} characters"),
]
Bio = Annotated[
    str,
    length(max_len=BIO_MAX_LEN, message=f"Bio cannot exceed {BIO_MAX_LEN} characters"),
]
ProfileImage = Annotated[
    str,
    Stripped,
    length(
        max_len=IMAGE_URL_MAX_LEN,
        message=f"Profile image URL cannot exceed {IMAGE_URL_MAX_LEN} characters",
    ),
]


class RegisterRequest(ApiModel):
    """New account; role is always 'user'."""

    username: Username
    email: Email
    password: Password
    first_name: FirstName
    last_name: LastName


class LoginRequest(ApiModel):
    """Credentials for login; identifier is a username or an email."""

    identifier: Annotated[str, Stripped, required("Email or username is required")]
    password: Annotated[str, required("Password is required")]


class ProfileUpdateRequest(ApiModel):
    first_name: FirstName | None = None
    last_name: LastName | None = None
    bio: Bio | None = None
    profile_image: ProfileImage | None = None


class ChangePasswordRequest(ApiModel):
    current_password: Annotated[str, required("Current password is required")]
    new_password: Password


class CurrentUser(ApiModel):
    """Verified token claims for the caller (id, username, email, role)."""

    id: int
    username: str
    email: str
    role: str


class UserOut(ApiModel):
    """Public view of a user; never carries the password hash."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str
    is_active: bool
    profile_image: str | None = None
    bio: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(ApiModel):
    """Returned by register and login."""

    message: str
    user: UserOut
    token: str


class ProfileResponse(ApiModel):
    message: str | None = None
    user: UserOut


class UserListItem(ApiModel):
    """User entry for admin list (no password)."""

    id: int
    username: str
    email: str
    role: str
    is_active: bool


class UsersListResponse(ApiModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]
