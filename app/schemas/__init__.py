"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserListItem,
    UserOut,
    UsersListResponse,
)
from app.schemas.category import CategoryCreate, CategoryOut
from app.schemas.common import ErrorResponse, MessageResponse, Pagination
from app.schemas.health import HealthResponse
from app.schemas.post import (
    CommentCreate,
    CommentOut,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostDetail,
    PostListResponse,
    PostOut,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "AuthResponse",
    "CategoryCreate",
    "CategoryOut",
    "ChangePasswordRequest",
    "CommentCreate",
    "CommentOut",
    "CommentResponse",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LikeResponse",
    "LoginRequest",
    "MessageResponse",
    "Pagination",
    "PostCreate",
    "PostDetail",
    "PostListResponse",
    "PostOut",
    "PostResponse",
    "PostUpdate",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "UserListItem",
    "UserOut",
    "UsersListResponse",
]
