"""Post routes: listing, reading, authoring, likes and comments."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, get_optional_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.common import MessageResponse
from app.schemas.post import (
    CommentCreate,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostDetail,
    PostListResponse,
    PostResponse,
    PostStatus,
    PostUpdate,
    SortField,
    SortOrder,
)
from app.services import posts as post_service
from app.services.posts import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()

Page = Annotated[int, Query(ge=1, description="1-based page number")]
Limit = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Posts per page")]


@router.get("", response_model=PostListResponse)
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[CurrentUser | None, Depends(get_optional_user)],
    page: Page = 1,
    limit: Limit = DEFAULT_PAGE_SIZE,
    category: Annotated[str | None, Query(description="Category id or name")] = None,
    post_status: Annotated[PostStatus, Query(alias="status")] = "published",
    search: Annotated[str | None, Query(max_length=200)] = None,
    sort_by: Annotated[SortField, Query(alias="sortBy")] = "createdAt",
    sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = "desc",
) -> PostListResponse:
    """
    List posts, newest first by default.

    Drafts and archived posts are only listed for their author (admins see all)
    and require a token.
    """
    return post_service.list_posts(
        db,
        viewer=viewer,
        page=page,
        limit=limit,
        category=category,
        status=post_status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/mine", response_model=PostListResponse)
def list_my_posts(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    page: Page = 1,
    limit: Limit = DEFAULT_PAGE_SIZE,
) -> PostListResponse:
    """The caller's own posts in every status."""
    return post_service.list_posts(
        db,
        viewer=current_user,
        page=page,
        limit=limit,
        status=None,
        author_id=current_user.id,
    )


@router.get("/{post_id}", response_model=PostDetail)
def get_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> PostDetail:
    """Return one post with its comments and count the view."""
    post = post_service.view_post(db, post_id, viewer)
    return post_service.to_post_detail(post)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    body: PostCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostResponse:
    post = post_service.create_post(db, current_user, body)
    return PostResponse(
        message="Blog post created successfully",
        post=post_service.to_post_detail(post),
    )


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    body: PostUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostResponse:
    """Owner or admin only."""
    post = post_service.update_post(db, current_user, post_id, body)
    return PostResponse(
        message="Post updated successfully",
        post=post_service.to_post_detail(post),
    )


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Owner or admin only."""
    post_service.delete_post(db, current_user, post_id)
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
def like_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> LikeResponse:
    likes, liked = post_service.toggle_like(db, current_user, post_id)
    return LikeResponse(
        message="Post liked" if liked else "Post unliked",
        likes=likes,
        user_liked=liked,
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    post_id: int,
    body: CommentCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CommentResponse:
    comment = post_service.add_comment(db, current_user, post_id, body)
    return CommentResponse(
        message="Comment added successfully",
        comment=post_service.to_comment_out(comment),
    )


@router.delete("/{post_id}/comments/{comment_id}", response_model=MessageResponse)
def delete_comment(
    post_id: int,
    comment_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Comment author or admin only."""
    post_service.delete_comment(db, current_user, post_id, comment_id)
    return MessageResponse(message="Comment deleted successfully")
