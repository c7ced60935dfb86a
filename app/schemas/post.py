"""Request/response schemas for posts, comments and likes."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BeforeValidator, Field

from app.core.validation import Stripped, length, one_of, reference_id, required
from app.schemas.common import ApiModel, Pagination

POST_STATUSES = ("draft", "published", "archived")
TITLE_MAX_LEN = 100
CONTENT_MIN_LEN = 5
EXCERPT_MAX_LEN = 300
COMMENT_MAX_LEN = 1000
MAX_TAGS = 20
TAG_MAX_LEN = 30
IMAGE_URL_MAX_LEN = 1024


def _split_tags(value: Any) -> Any:
    """Accept a list of tags or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(",")
    return value


def _distinct_non_empty(tags: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags:
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


Title = Annotated[
    str,
    Stripped,
    length(1, TITLE_MAX_LEN, message=f"Title must be between 1 and {TITLE_MAX_LEN} characters"),
]
Content = Annotated[
    str,
    Stripped,
    length(CONTENT_MIN_LEN, message=f"Content must be at least {CONTENT_MIN_LEN} characters long"),
]
Excerpt = Annotated[
    str,
    Stripped,
    length(max_len=EXCERPT_MAX_LEN, message=f"Excerpt cannot exceed {EXCERPT_MAX_LEN} characters"),
]
CategoryRef = Annotated[int, reference_id("Valid category ID is required")]
Status = Annotated[
    str,
    Stripped,
    one_of(POST_STATUSES, message="Status must be one of draft, published, archived"),
]
Tag = Annotated[
    str,
    Stripped,
    length(max_len=TAG_MAX_LEN, message=f"Tags cannot exceed {TAG_MAX_LEN} characters"),
]
Tags = Annotated[
    list[Tag],
    BeforeValidator(_split_tags),
    AfterValidator(_distinct_non_empty),
    length(max_len=MAX_TAGS, message=f"A post can have at most {MAX_TAGS} tags"),
]
FeaturedImage = Annotated[
    str,
    Stripped,
    length(
        max_len=IMAGE_URL_MAX_LEN,
        message=f"Featured image URL cannot exceed {IMAGE_URL_MAX_LEN} characters",
    ),
]


class PostCreate(ApiModel):
    title: Title
    content: Content
    category: CategoryRef
    excerpt: Excerpt | None = None
    tags: Tags = Field(default_factory=list)
    status: Status = "draft"
    featured_image: FeaturedImage | None = None


class PostUpdate(ApiModel):
    """Partial update; omitted fields keep their value."""

    title: Title | None = None
    content: Content | None = None
    category: CategoryRef | None = None
    excerpt: Excerpt | None = None
    tags: Tags | None = None
    status: Status | None = None
    featured_image: FeaturedImage | None = None


class CommentCreate(ApiModel):
    content: Annotated[
        str,
        Stripped,
        required("Comment content is required"),
        length(max_len=COMMENT_MAX_LEN, message=f"Comment cannot exceed {COMMENT_MAX_LEN} characters"),
    ]


class AuthorSummary(ApiModel):
    id: int
    username: str
    first_name: str
    last_name: str
    profile_image: str | None = None


class CategorySummary(ApiModel):
    id: int
    name: str


class CommentOut(ApiModel):
    id: int
    content: str
    author: AuthorSummary
    created_at: datetime | None = None


class PostOut(ApiModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    category: CategorySummary
    author: AuthorSummary
    tags: list[str]
    status: str
    views: int
    read_time: int
    likes: int
    featured_image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostDetail(PostOut):
    comments: list[CommentOut] = Field(default_factory=list)


class PostListResponse(ApiModel):
    posts: list[PostOut]
    pagination: Pagination


class PostResponse(ApiModel):
    message: str
    post: PostDetail


class CommentResponse(ApiModel):
    message: str
    comment: CommentOut


class LikeResponse(ApiModel):
    message: str
    likes: int
    user_liked: bool


PostStatus = Literal["draft", "published", "archived"]
SortField = Literal["createdAt", "updatedAt", "title", "views"]
SortOrder = Literal["asc", "desc"]
