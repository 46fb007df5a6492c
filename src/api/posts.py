"""Social feed API endpoints. Every route requires authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_current_user, get_post_service
from src.models.post import Post
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.post import (
    CommentCreate,
    CommentPage,
    CommentResponse,
    LikeResult,
    PostCreate,
    PostPage,
    PostResponse,
    RepostCreate,
)
from src.services.post_service import DEFAULT_PAGE_SIZE, PostService

router = APIRouter(
    prefix="/api/v1/posts",
    tags=["posts"],
    dependencies=[Depends(get_current_user)],
)

Cursor = Annotated[int | None, Query()]
Limit = Annotated[int, Query(ge=1, le=100)]


def get_post_or_404(service: PostService, post_id: int) -> Post:
    post = service.get_post(post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.get("", response_model=PostPage)
async def get_feed(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
    cursor: Cursor = None,
    limit: Limit = DEFAULT_PAGE_SIZE,
):
    """Get the feed, newest first."""
    return service.get_feed(current_user.id, cursor, limit)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Create a new post."""
    post = service.create_post(current_user.id, post_data.content, [str(url) for url in post_data.images])
    return service.to_responses([post], current_user.id)[0]


@router.get("/user/{user_id}", response_model=PostPage)
async def get_user_posts(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
    cursor: Cursor = None,
    limit: Limit = DEFAULT_PAGE_SIZE,
):
    """Get one user's posts for their profile page."""
    return service.get_user_posts(user_id, current_user.id, cursor, limit)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a comment (author only)."""
    comment = service.get_comment(comment_id)
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this comment",
        )
    service.delete_comment(comment)
    return MessageResponse(message="Comment deleted")


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Get a specific post."""
    post = get_post_or_404(service, post_id)
    return service.to_responses([post], current_user.id)[0]


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a post (author only)."""
    post = get_post_or_404(service, post_id)
    if post.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this post",
        )
    service.delete_post(post)
    return MessageResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=LikeResult)
async def like_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Like a post."""
    get_post_or_404(service, post_id)
    if service.get_like(post_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already liked this post")
    return LikeResult(liked=True, like_count=service.add_like(post_id, current_user.id))


@router.delete("/{post_id}/like", response_model=LikeResult)
async def unlike_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Remove a like."""
    like = service.get_like(post_id, current_user.id)
    if not like:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You haven't liked this post")
    return LikeResult(liked=False, like_count=service.remove_like(like))


@router.get("/{post_id}/comments", response_model=CommentPage)
async def get_comments(
    post_id: int,
    service: Annotated[PostService, Depends(get_post_service)],
    cursor: Cursor = None,
    limit: Limit = DEFAULT_PAGE_SIZE,
):
    """Get comments on a post, newest first."""
    get_post_or_404(service, post_id)
    return service.get_comments(post_id, cursor, limit)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Comment on a post."""
    get_post_or_404(service, post_id)
    return service.create_comment(post_id, current_user.id, comment_data.content)


@router.post("/{post_id}/repost", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def repost(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
    repost_data: RepostCreate | None = None,
):
    """Repost a post, optionally with a quote."""
    original = get_post_or_404(service, post_id)
    if service.get_repost(post_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already reposted this")

    comment = repost_data.repost_comment if repost_data else None
    post = service.create_repost(original, current_user.id, comment)
    return service.to_responses([post], current_user.id)[0]


@router.delete("/{post_id}/repost", response_model=MessageResponse)
async def undo_repost(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Undo a repost."""
    existing = service.get_repost(post_id, current_user.id)
    if not existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You haven't reposted this post",
        )
    service.delete_post(existing)
    return MessageResponse(message="Repost removed")
