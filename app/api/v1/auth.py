"""Auth routes (register, login, profile, password) and the bearer-token dependencies."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AccessDenied, TokenInvalid, Unauthorized
from app.core.permissions import ADMIN_ROLE
from app.core.security import create_access_token, decode_access_token, token_claims_for
from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UsersListResponse,
)
from app.schemas.common import MessageResponse
from app.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _identity_from_claims(payload: dict[str, Any]) -> CurrentUser:
    """Build the request identity from verified claims; no database read."""
    try:
        user_id = int(payload.get("userId", payload["sub"]))
    except (KeyError, TypeError, ValueError):
        raise TokenInvalid("Invalid token payload")
    username = payload.get("username")
    role = payload.get("role")
    if not username or not role:
        raise TokenInvalid("Invalid token payload")
    return CurrentUser(
        id=user_id,
        username=username,
        email=payload.get("email") or "",
        role=role,
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the caller's claim snapshot.
    Missing header -> 401; expired token -> 401; any other bad token -> 403.
    """
    if credentials is None:
        raise Unauthorized()
    payload = decode_access_token(credentials.credentials)
    return _identity_from_claims(payload)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser | None:
    """Like get_current_user, but anonymous callers get None. A bad token still fails."""
    if credentials is None:
        return None
    return _identity_from_claims(decode_access_token(credentials.credentials))


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != ADMIN_ROLE:
        raise AccessDenied("Admin access required")
    return current_user


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create an account with role 'user' and return it with an access token."""
    user = user_service.create_user(db, body)
    token = create_access_token(token_claims_for(user))
    return AuthResponse(
        message="User registered successfully",
        user=user_service.to_user_out(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username or email plus password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = user_service.authenticate(db, body.identifier, body.password)
    token = create_access_token(token_claims_for(user))
    logger.info("Login succeeded for user id=%s", user.id)
    return AuthResponse(
        message="Login successful",
        user=user_service.to_user_out(user),
        token=token,
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    user = user_service.get_user(db, current_user.id)
    return ProfileResponse(user=user_service.to_user_out(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    user = user_service.update_profile(db, current_user.id, body)
    return ProfileResponse(
        message="Profile updated successfully",
        user=user_service.to_user_out(user),
    )


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user_service.change_password(db, current_user.id, body)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logout successful")


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=user_service.list_users(db))
