"""Social feed schemas."""

from datetime import datetime

from pydantic import Field, HttpUrl

from src.schemas.auth import UserSummary
from src.schemas.base import APIModel


class PostCreate(APIModel):
    """Create a post."""

    content: str = Field(..., min_length=1, max_length=500)
    images: list[HttpUrl] = Field(default_factory=list, max_length=4)


class RepostCreate(APIModel):
    """Repost, optionally with a quote."""

    repost_comment: str | None = Field(None, max_length=500)


class CommentCreate(APIModel):
    content: str = Field(..., min_length=1, max_length=300)


class PostCounts(APIModel):
    likes: int = 0
    comments: int = 0
    reposts: int = 0


class OriginalPost(APIModel):
    """The post a repost points at."""

    id: int
    content: str
    images: list[str]
    created_at: datetime
    user: UserSummary


class PostResponse(APIModel):
    """Post with author, counts, and the viewer's like state."""

    id: int
    content: str
    images: list[str]
    is_repost: bool
    original_post_id: int | None
    repost_comment: str | None
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    original_post: OriginalPost | None = None
    counts: PostCounts = Field(default_factory=PostCounts)
    is_liked_by_user: bool = False


class PostPage(APIModel):
    posts: list[PostResponse]
    next_cursor: int | None
    has_more: bool


class CommentResponse(APIModel):
    id: int
    post_id: int
    content: str
    created_at: datetime
    user: UserSummary


class CommentPage(APIModel):
    comments: list[CommentResponse]
    next_cursor: int | None
    has_more: bool


class LikeResult(APIModel):
    liked: bool
    like_count: int
