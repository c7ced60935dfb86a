"""URL-safe slugs derived from post titles, made unique with a numeric suffix."""

import re

from sqlalchemy.orm import Session

from app.models import Post

_UNSAFE_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RUNS = re.compile(r"[\s_-]+", re.ASCII)
FALLBACK_SLUG = "post"


def slugify(title: str) -> str:
    """Lowercase, drop punctuation, join words with single hyphens."""
    slug = _UNSAFE_CHARS.sub("", title.lower())
    slug = _SEPARATOR_RUNS.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


def _slug_taken(db: Session, slug: str, exclude_id: int | None) -> bool:
    query = db.query(Post.id).filter(Post.slug == slug)
    if exclude_id is not None:
        query = query.filter(Post.id != exclude_id)
    return query.first() is not None


def unique_slug(db: Session, title: str, exclude_id: int | None = None) -> str:
    """
    Return slugify(title), or the first free "<slug>-N" for N = 1, 2, ...

    Check-then-insert is not atomic: two concurrent posts with the same title can
    both pick the same slug, and the unique index on posts.slug rejects the loser.
    """
    base = slugify(title)
    candidate = base
    suffix = 0
    while _slug_taken(db, candidate, exclude_id):
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate
