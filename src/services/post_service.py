"""Social feed service: posts, likes, comments, and reposts."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from src.models.post import Comment, Like, Post
from src.schemas.post import CommentPage, CommentResponse, PostCounts, PostPage, PostResponse

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def paginate(rows: list, limit: int) -> tuple[list, int | None, bool]:
    """Split a limit+1 fetch into (page, next_cursor, has_more)."""
    has_more = len(rows) > limit
    page = rows[:limit]
    next_cursor = page[-1].id if has_more else None
    return page, next_cursor, has_more


class PostService:
    """Service for feed operations. Pages run newest first by id; cursors are the id of the last item seen."""

    def __init__(self, db: Session):
        self.db = db

    def _post_query(self):
        return self.db.query(Post).options(
            joinedload(Post.user),
            joinedload(Post.original_post).joinedload(Post.user),
        )

    def _count_by_post(self, column, post_ids: list[int], *criteria) -> dict[int, int]:
        rows = (
            self.db.query(column, func.count())
            .filter(column.in_(post_ids), *criteria)
            .group_by(column)
            .all()
        )
        return dict(rows)

    def to_responses(self, posts: list[Post], viewer_id: int) -> list[PostResponse]:
        """Attach counts and like state, using one query per aggregate."""
        post_ids = [post.id for post in posts]
        if not post_ids:
            return []

        likes = self._count_by_post(Like.post_id, post_ids)
        comments = self._count_by_post(Comment.post_id, post_ids)
        reposts = self._count_by_post(Post.original_post_id, post_ids, Post.is_repost.is_(True))
        liked = {
            post_id
            for (post_id,) in self.db.query(Like.post_id)
            .filter(Like.user_id == viewer_id, Like.post_id.in_(post_ids))
            .all()
        }

        responses = []
        for post in posts:
            response = PostResponse.model_validate(post)
            response.counts = PostCounts(
                likes=likes.get(post.id, 0),
                comments=comments.get(post.id, 0),
                reposts=reposts.get(post.id, 0),
            )
            response.is_liked_by_user = post.id in liked
            responses.append(response)
        return responses

    def _page(self, query, viewer_id: int, cursor: int | None, limit: int) -> PostPage:
        if cursor is not None:
            query = query.filter(Post.id < cursor)
        rows = query.order_by(Post.id.desc()).limit(limit + 1).all()
        page, next_cursor, has_more = paginate(rows, limit)
        return PostPage(
            posts=self.to_responses(page, viewer_id),
            next_cursor=next_cursor,
            has_more=has_more,
        )

    def get_feed(self, viewer_id: int, cursor: int | None = None, limit: int = DEFAULT_PAGE_SIZE) -> PostPage:
        """All posts, newest first."""
        return self._page(self._post_query(), viewer_id, cursor, limit)

    def get_user_posts(
        self, user_id: int, viewer_id: int, cursor: int | None = None, limit: int = DEFAULT_PAGE_SIZE
    ) -> PostPage:
        """One user's posts, newest first."""
        return self._page(self._post_query().filter(Post.user_id == user_id), viewer_id, cursor, limit)

    def get_post(self, post_id: int) -> Post | None:
        return self._post_query().filter(Post.id == post_id).first()

    def create_post(self, user_id: int, content: str, images: list[str]) -> Post:
        post = Post(user_id=user_id, content=content, images=images)
        self.db.add(post)
        self.db.commit()
        logger.info(f"User {user_id} created post {post.id}")
        return self.get_post(post.id)

    def delete_post(self, post: Post) -> None:
        self.db.delete(post)
        self.db.commit()

    def get_like(self, post_id: int, user_id: int) -> Like | None:
        return self.db.query(Like).filter(Like.post_id == post_id, Like.user_id == user_id).first()

    def like_count(self, post_id: int) -> int:
        return self.db.query(Like).filter(Like.post_id == post_id).count()

    def add_like(self, post_id: int, user_id: int) -> int:
        self.db.add(Like(post_id=post_id, user_id=user_id))
        self.db.commit()
        return self.like_count(post_id)

    def remove_like(self, like: Like) -> int:
        post_id = like.post_id
        self.db.delete(like)
        self.db.commit()
        return self.like_count(post_id)

    def create_comment(self, post_id: int, user_id: int, content: str) -> Comment:
        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def get_comment(self, comment_id: int) -> Comment | None:
        return self.db.query(Comment).filter(Comment.id == comment_id).first()

    def get_comments(self, post_id: int, cursor: int | None = None, limit: int = DEFAULT_PAGE_SIZE) -> CommentPage:
        """Comments on a post, newest first."""
        query = self.db.query(Comment).options(joinedload(Comment.user)).filter(Comment.post_id == post_id)
        if cursor is not None:
            query = query.filter(Comment.id < cursor)
        rows = query.order_by(Comment.id.desc()).limit(limit + 1).all()
        page, next_cursor, has_more = paginate(rows, limit)
        return CommentPage(
            comments=[CommentResponse.model_validate(comment) for comment in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    def delete_comment(self, comment: Comment) -> None:
        self.db.delete(comment)
        self.db.commit()

    def get_repost(self, original_post_id: int, user_id: int) -> Post | None:
        return (
            self.db.query(Post)
            .filter(
                Post.user_id == user_id,
                Post.original_post_id == original_post_id,
                Post.is_repost.is_(True),
            )
            .first()
        )

    def create_repost(self, original: Post, user_id: int, repost_comment: str | None) -> Post:
        """Repost copies the original's content and links back to it."""
        repost = Post(
            user_id=user_id,
            content=original.content,
            images=[],
            is_repost=True,
            original_post_id=original.id,
            repost_comment=repost_comment or None,
        )
        self.db.add(repost)
        self.db.commit()
        logger.info(f"User {user_id} reposted post {original.id}")
        return self.get_post(repost.id)
