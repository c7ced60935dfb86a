"""User accounts: registration, credential checks, profile and password changes."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    Conflict,
    CredentialError,
    FieldError,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from app.core.security import hash_password, verify_password
from app.models import User
from app.schemas.auth import (
    ChangePasswordRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserListItem,
    UserOut,
)

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        role=user.role,
        is_active=user.is_active,
        profile_image=user.profile_image,
        bio=user.bio,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def create_user(db: Session, body: RegisterRequest, role: str = "user") -> User:
    """Persist a new user. Raises Conflict if the username or email is taken."""
    existing = (
        db.query(User.id)
        .filter(or_(User.username == body.username, User.email == body.email))
        .first()
    )
    if existing is not None:
        raise Conflict(DUPLICATE_USER_MESSAGE)

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Duplicate user rejected by unique index: username=%s", body.username)
        raise Conflict(DUPLICATE_USER_MESSAGE) from e
    db.refresh(user)
    logger.info("Created user id=%s username=%s role=%s", user.id, user.username, role)
    return user


def authenticate(db: Session, identifier: str, password: str) -> User:
    """
    Return the active user whose username or email matches identifier and whose
    password verifies. Raises Unauthorized otherwise.
    """
    user = (
        db.query(User)
        .filter(or_(User.email == identifier.lower(), User.username == identifier))
        .first()
    )
    if user is None:
        logger.info("Login failed: unknown identifier")
        raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
    if not user.is_active:
        logger.info("Login refused for deactivated user id=%s", user.id)
        raise Unauthorized("Account is deactivated")
    try:
        password_ok = verify_password(password, user.password_hash)
    except CredentialError:
        logger.warning("Unusable password hash stored for user id=%s", user.id)
        raise
    if not password_ok:
        logger.info("Login failed: wrong password for user id=%s", user.id)
        raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, user_id: int, body: ProfileUpdateRequest) -> User:
    """Apply the fields present in body; others are left unchanged."""
    user = get_user(db, user_id)
    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        # Names are required columns; an explicit null leaves them as they are.
        if value is None and field in ("first_name", "last_name"):
            continue
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, body: ChangePasswordRequest) -> None:
    user = get_user(db, user_id)
    try:
        password_ok = verify_password(body.current_password, user.password_hash)
    except CredentialError:
        logger.warning("Unusable password hash stored for user id=%s", user.id)
        raise
    if not password_ok:
        raise ValidationFailed(
            [FieldError(field="currentPassword", message="Current password is incorrect")],
            message="Current password is incorrect",
        )
    user.password_hash = hash_password(body.new_password)
    db.commit()
    logger.info("Password changed for user id=%s", user.id)


def list_users(db: Session) -> list[UserListItem]:
    users = db.query(User).order_by(User.id).all()
    return [
        UserListItem(
            id=u.id,
            username=u.username,
            email=u.email,
            role=u.role,
            is_active=u.is_active,
        )
        for u in users
    ]
