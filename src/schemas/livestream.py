"""Livestream schemas."""

from datetime import datetime

from pydantic import Field

from src.schemas.auth import UserSummary
from src.schemas.base import APIModel


class LivestreamCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=100)


class LivestreamResponse(APIModel):
    """Livestream with host info."""

    id: int
    title: str
    status: str
    viewer_count: int
    started_at: datetime
    ended_at: datetime | None
    room_name: str
    user: UserSummary


class LivestreamSession(LivestreamResponse):
    """Livestream plus the credentials to connect to its room."""

    token: str
    livekit_url: str


class WebhookAck(APIModel):
    received: bool = True
