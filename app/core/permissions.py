"""Ownership guard: only a resource's owner or an admin may modify it."""

from typing import TYPE_CHECKING

from app.core.errors import AccessDenied

if TYPE_CHECKING:
    from app.schemas.auth import CurrentUser

ADMIN_ROLE = "admin"


def can_modify(identity: "CurrentUser", owner_id: int | None) -> bool:
    """True iff identity owns the resource or holds the admin role."""
    if identity.role == ADMIN_ROLE:
        return True
    return owner_id is not None and identity.id == owner_id


def ensure_can_modify(
    identity: "CurrentUser",
    owner_id: int | None,
    message: str = "Access denied",
) -> None:
    """Raise AccessDenied unless can_modify. Call after the resource has been fetched."""
    if not can_modify(identity, owner_id):
        raise AccessDenied(message)
