"""
Post query layer and post mutations.

Every mutation of an existing post or comment fetches the row first (NotFound),
then checks ownership (AccessDenied), then validates references, and only then
writes. No partial writes happen before the ownership check.
"""

import logging
import math
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.errors import Conflict, FieldError, NotFound, Unauthorized, ValidationFailed
from app.core.permissions import ADMIN_ROLE, can_modify, ensure_can_modify
from app.core.validation import is_id_text
from app.models import Category, Comment, Post, PostLike, PostTag, User
from app.schemas.auth import CurrentUser
from app.schemas.common import Pagination
from app.schemas.post import (
    AuthorSummary,
    CategorySummary,
    CommentCreate,
    CommentOut,
    PostCreate,
    PostDetail,
    PostListResponse,
    PostOut,
    PostUpdate,
)
from app.services.categories import get_category
from app.services.slug import unique_slug

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
WORDS_PER_MINUTE = 200
AUTO_EXCERPT_LEN = 200

SORT_COLUMNS = {
    "createdAt": Post.created_at,
    "updatedAt": Post.updated_at,
    "title": Post.title,
    "views": Post.views,
}

POST_NOT_FOUND = "Post not found"
NOT_YOUR_POST = "Access denied. You can only edit your own posts."


def read_time_minutes(content: str) -> int:
    return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


def auto_excerpt(content: str) -> str:
    if len(content) <= AUTO_EXCERPT_LEN:
        return content
    return content[:AUTO_EXCERPT_LEN] + "..."


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _author_summary(user: User) -> AuthorSummary:
    return AuthorSummary(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image=user.profile_image,
    )


def _post_fields(post: Post) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "content": post.content,
        "excerpt": post.excerpt,
        "category": CategorySummary(id=post.category.id, name=post.category.name),
        "author": _author_summary(post.author),
        "tags": post.tags,
        "status": post.status,
        "views": post.views,
        "read_time": post.read_time,
        "likes": len(post.likes),
        "featured_image": post.featured_image,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def to_post_out(post: Post) -> PostOut:
    return PostOut(**_post_fields(post))


def to_comment_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        content=comment.content,
        author=_author_summary(comment.author),
        created_at=comment.created_at,
    )


def to_post_detail(post: Post) -> PostDetail:
    return PostDetail(
        **_post_fields(post),
        comments=[to_comment_out(c) for c in post.comments],
    )


def paginate(query: Query, page: int, limit: int) -> tuple[list[Any], Pagination]:
    """Return one page of query plus pagination metadata. page is 1-based."""
    total = query.order_by(None).count()
    total_pages = math.ceil(total / limit) if total else 0
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, Pagination(
        current_page=page,
        total_pages=total_pages,
        total_posts=total,
        limit=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def list_posts(
    db: Session,
    *,
    viewer: CurrentUser | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    category: str | None = None,
    status: str | None = "published",
    search: str | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    author_id: int | None = None,
) -> PostListResponse:
    """
    Filtered, sorted, paginated post listing.

    category is a category id or name ("All" means no filter). search matches title,
    content or any tag, case-insensitively. status=None lists every status.
    Anything other than published posts is restricted to the viewer's own posts
    unless the viewer is an admin.
    """
    query = db.query(Post)

    if status is not None:
        query = query.filter(Post.status == status)
    if status != "published":
        if viewer is None:
            raise Unauthorized()
        if viewer.role != ADMIN_ROLE:
            query = query.filter(Post.author_id == viewer.id)
    if author_id is not None:
        query = query.filter(Post.author_id == author_id)

    if category and category != "All":
        if is_id_text(category):
            query = query.filter(Post.category_id == int(category))
        else:
            query = query.filter(Post.category.has(Category.name == category))

    if search and search.strip():
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.content.ilike(pattern, escape="\\"),
                Post.tag_rows.any(PostTag.name.ilike(pattern, escape="\\")),
            )
        )

    column = SORT_COLUMNS.get(sort_by, Post.created_at)
    if sort_order == "asc":
        query = query.order_by(column.asc(), Post.id.asc())
    else:
        query = query.order_by(column.desc(), Post.id.desc())

    posts, pagination = paginate(query, page, limit)
    return PostListResponse(posts=[to_post_out(p) for p in posts], pagination=pagination)


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise NotFound(POST_NOT_FOUND)
    return post


def view_post(db: Session, post_id: int, viewer: CurrentUser | None) -> Post:
    """
    Fetch a post for reading and count the view.
    Unpublished posts are reported as missing to anyone but their author or an admin.
    """
    post = get_post(db, post_id)
    if post.status != "published" and (viewer is None or not can_modify(viewer, post.author_id)):
        raise NotFound(POST_NOT_FOUND)
    post.views = Post.views + 1
    db.commit()
    db.refresh(post)
    return post


def _require_category(db: Session, category_id: int) -> None:
    if get_category(db, category_id) is None:
        raise ValidationFailed([FieldError(field="category", message="Category not found")])


def _commit_post(db: Session, post: Post) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Post write rejected by unique index: slug=%s", post.slug)
        raise Conflict("A post with this slug already exists") from e
    db.refresh(post)


def create_post(db: Session, author: CurrentUser, body: PostCreate) -> Post:
    _require_category(db, body.category)
    post = Post(
        title=body.title,
        slug=unique_slug(db, body.title),
        content=body.content,
        excerpt=body.excerpt or auto_excerpt(body.content),
        category_id=body.category,
        author_id=author.id,
        status=body.status,
        read_time=read_time_minutes(body.content),
        featured_image=body.featured_image,
        tag_rows=[PostTag(name=t) for t in body.tags],
    )
    db.add(post)
    _commit_post(db, post)
    logger.info("Created post id=%s slug=%s author_id=%s", post.id, post.slug, author.id)
    return post


def update_post(db: Session, identity: CurrentUser, post_id: int, body: PostUpdate) -> Post:
    post = get_post(db, post_id)
    ensure_can_modify(identity, post.author_id, NOT_YOUR_POST)

    changes = body.model_dump(exclude_unset=True)
    if changes.get("category") is not None:
        _require_category(db, changes["category"])

    if changes.get("title") is not None and changes["title"] != post.title:
        post.title = changes["title"]
        post.slug = unique_slug(db, post.title, exclude_id=post.id)
    if changes.get("content") is not None:
        post.content = changes["content"]
        post.read_time = read_time_minutes(post.content)
    if changes.get("category") is not None:
        post.category_id = changes["category"]
    if changes.get("status") is not None:
        post.status = changes["status"]
    if "excerpt" in changes:
        post.excerpt = changes["excerpt"]
    if "featured_image" in changes:
        post.featured_image = changes["featured_image"]
    if changes.get("tags") is not None:
        # Reuse rows for kept tags so the (post_id, name) index never sees a duplicate insert.
        existing = {t.name: t for t in post.tag_rows}
        post.tag_rows = [existing.get(name) or PostTag(name=name) for name in changes["tags"]]

    _commit_post(db, post)
    logger.info("Updated post id=%s by user id=%s", post.id, identity.id)
    return post


def delete_post(db: Session, identity: CurrentUser, post_id: int) -> None:
    post = get_post(db, post_id)
    ensure_can_modify(identity, post.author_id, NOT_YOUR_POST)
    db.delete(post)
    db.commit()
    logger.info("Deleted post id=%s by user id=%s", post_id, identity.id)


def toggle_like(db: Session, identity: CurrentUser, post_id: int) -> tuple[int, bool]:
    """Like the post, or unlike it if already liked. Returns (like count, liked now)."""
    post = get_post(db, post_id)
    like = (
        db.query(PostLike)
        .filter(PostLike.post_id == post.id, PostLike.user_id == identity.id)
        .first()
    )
    if like is None:
        post.likes.append(PostLike(user_id=identity.id))
        liked = True
    else:
        post.likes.remove(like)
        liked = False
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Post already liked") from e
    db.refresh(post)
    return len(post.likes), liked


def add_comment(db: Session, identity: CurrentUser, post_id: int, body: CommentCreate) -> Comment:
    post = get_post(db, post_id)
    comment = Comment(post_id=post.id, author_id=identity.id, content=body.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, identity: CurrentUser, post_id: int, comment_id: int) -> None:
    post = get_post(db, post_id)
    comment = (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.post_id == post.id)
        .first()
    )
    if comment is None:
        raise NotFound("Comment not found")
    ensure_can_modify(identity, comment.author_id)
    db.delete(comment)
    db.commit()
    logger.info("Deleted comment id=%s on post id=%s by user id=%s", comment_id, post_id, identity.id)
