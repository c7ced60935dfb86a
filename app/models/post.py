"""ORM models for blog posts and the rows hanging off them (tags, comments, likes)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class Post(Base):
    """
    A blog post. slug is derived from title (see app.services.slug) and unique.

    status: 'draft', 'published' or 'archived'.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=True)
    category_id = Column(
        Integer, ForeignKey("categories.id"), nullable=False, index=True
    )
    author_id = Column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    status = Column(String(16), nullable=False, default="draft", server_default="draft", index=True)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    read_time = Column(Integer, nullable=False, default=0, server_default="0")
    featured_image = Column(String(1024), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    author = relationship("User", lazy="joined")
    category = relationship("Category", lazy="joined")
    tag_rows = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        order_by="PostTag.id",
        lazy="selectin",
    )
    comments = relationship(
        "Comment",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    likes = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        return [t.name for t in self.tag_rows]


class PostTag(Base):
    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "name", name="uq_post_tags_post_id_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(30), nullable=False, index=True)


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    author = relationship("User", lazy="joined")


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_id_user_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
