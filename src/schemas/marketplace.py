"""Marketplace schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, HttpUrl

from src.models.enums import ItemCondition, ListingCategory, ListingStatus
from src.schemas.auth import UserSummary
from src.schemas.base import APIModel

SortBy = Literal["recent", "price-low", "price-high", "popular"]


class ListingCreate(APIModel):
    """Create a marketplace listing."""

    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    images: list[HttpUrl] = Field(default_factory=list, max_length=10)
    condition: ItemCondition
    category: ListingCategory
    location: str = Field(..., min_length=3, max_length=200)


class ListingUpdate(APIModel):
    """Update a listing. Omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, min_length=10, max_length=2000)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    images: list[HttpUrl] | None = Field(None, max_length=10)
    condition: ItemCondition | None = None
    category: ListingCategory | None = None
    location: str | None = Field(None, min_length=3, max_length=200)
    status: ListingStatus | None = None


class ListingResponse(APIModel):
    """Listing response with seller info."""

    id: int
    title: str
    description: str
    price: float
    original_price: float | None
    images: list[str]
    condition: str
    category: str
    location: str
    views: int
    status: str
    created_at: datetime
    updated_at: datetime
    seller: UserSummary
    favorites_count: int = 0


class FavoriteToggleResponse(APIModel):
    """Favorite state after a toggle."""

    listing_id: int
    favorited: bool
