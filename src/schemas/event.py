"""Event schemas."""

from datetime import UTC, datetime

from pydantic import Field, HttpUrl, field_validator, model_validator

from src.schemas.base import APIModel


class EventCreate(APIModel):
    """Create an event."""

    title: str = Field(..., min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    start_date: datetime
    end_date: datetime
    location: str | None = Field(None, max_length=200)
    banner: HttpUrl | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def check_dates(self) -> "EventCreate":
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class EventResponse(APIModel):
    """Event response."""

    id: int
    title: str
    description: str | None
    start_date: datetime
    end_date: datetime
    location: str | None
    banner: str | None
    created_by_id: int
    created_at: datetime
