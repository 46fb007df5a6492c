"""SQLAlchemy models."""

from src.models.event import Event
from src.models.listing import Listing, ListingFavorite
from src.models.livestream import Livestream
from src.models.post import Comment, Like, Post
from src.models.user import User

__all__ = [
    "User",
    "Event",
    "Listing",
    "ListingFavorite",
    "Post",
    "Like",
    "Comment",
    "Livestream",
]
