"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.category import Category
from app.models.post import Comment, Post, PostLike, PostTag
from app.models.user import User

__all__ = ["Base", "Category", "Comment", "Post", "PostLike", "PostTag", "User"]
