"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import CredentialError, TokenExpired, TokenInvalid

if TYPE_CHECKING:
    from app.models.user import User

# Claims every accepted token must carry.
REQUIRED_CLAIMS = ("sub", "iat", "exp")


def _password_bytes(plain_password: str) -> bytes:
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    return plain_password.encode("utf-8")[:72]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    return bcrypt.hashpw(
        _password_bytes(plain_password), bcrypt.gensalt(rounds=cost)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.
    Returns False on mismatch; raises CredentialError if the stored hash is unusable.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        raise CredentialError() from e


def token_claims_for(user: "User") -> dict[str, Any]:
    """Identity claims embedded in a user's access token."""
    return {
        "sub": str(user.id),
        "userId": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
    }


def create_access_token(
    claims: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Create a signed JWT carrying claims plus iat and exp."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        **claims,
        "iat": now,
        "exp": now + expires_delta,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return its claims.
    Raises TokenExpired past exp, TokenInvalid on any other signature or format problem.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired() from e
    except jwt.PyJWTError as e:
        raise TokenInvalid() from e
