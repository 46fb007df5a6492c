"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, PublicUser, UserLogin, UserRegister, UserSummary
from src.schemas.event import EventCreate, EventResponse
from src.schemas.livestream import LivestreamCreate, LivestreamResponse, LivestreamSession
from src.schemas.marketplace import ListingCreate, ListingResponse, ListingUpdate
from src.schemas.post import CommentCreate, CommentResponse, PostCreate, PostPage, PostResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "PublicUser",
    "UserSummary",
    "EventCreate",
    "EventResponse",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "PostCreate",
    "PostResponse",
    "PostPage",
    "CommentCreate",
    "CommentResponse",
    "LivestreamCreate",
    "LivestreamResponse",
    "LivestreamSession",
]
