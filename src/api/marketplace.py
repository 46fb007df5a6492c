"""Marketplace API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_current_user, get_marketplace_service
from src.models.enums import ItemCondition, ListingCategory, ListingStatus
from src.models.listing import Listing
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.marketplace import (
    FavoriteToggleResponse,
    ListingCreate,
    ListingResponse,
    ListingUpdate,
    SortBy,
)
from src.services.marketplace_service import ListingFilters, MarketplaceService

router = APIRouter(prefix="/api/v1/marketplace", tags=["marketplace"])


def build_responses(service: MarketplaceService, listings: list[Listing]) -> list[ListingResponse]:
    """Attach favorite counts to listings."""
    counts = service.favorite_counts([listing.id for listing in listings])
    result = []
    for listing in listings:
        response = ListingResponse.model_validate(listing)
        response.favorites_count = counts.get(listing.id, 0)
        result.append(response)
    return result


def get_visible_listing(service: MarketplaceService, listing_id: int) -> Listing:
    """Get a listing that has not been deleted."""
    listing = service.get_listing(listing_id)
    if not listing or not ListingStatus(listing.status).is_visible():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return listing


def get_owned_listing(service: MarketplaceService, listing_id: int, user: User) -> Listing:
    """Get a listing the user is selling."""
    listing = get_visible_listing(service, listing_id)
    if listing.seller_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to modify this listing",
        )
    return listing


def _listing_fields(data: ListingCreate | ListingUpdate, exclude_unset: bool = False) -> dict:
    fields = data.model_dump(exclude_unset=exclude_unset, exclude_none=exclude_unset)
    if fields.get("images") is not None:
        fields["images"] = [str(url) for url in fields["images"]]
    return fields


@router.get("", response_model=list[ListingResponse])
async def get_listings(
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
    category: ListingCategory | None = None,
    condition: ItemCondition | None = None,
    min_price: Annotated[float | None, Query(alias="minPrice", gt=0)] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice", gt=0)] = None,
    search: str | None = None,
    seller_id: Annotated[int | None, Query(alias="sellerId")] = None,
    listing_status: Annotated[ListingStatus, Query(alias="status")] = ListingStatus.ACTIVE,
    sort_by: Annotated[SortBy, Query(alias="sortBy")] = "recent",
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    offset: Annotated[int | None, Query(ge=0)] = None,
):
    """Browse listings. Only active listings unless a status is given."""
    filters = ListingFilters(
        category=category,
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        search=search,
        seller_id=seller_id,
        status=listing_status,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )
    return build_responses(service, service.list_listings(filters))


@router.get("/favorites", response_model=list[ListingResponse])
async def get_favorites(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Get the current user's favorited listings."""
    return build_responses(service, service.get_user_favorites(current_user.id))


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: int,
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Get a specific listing."""
    listing = get_visible_listing(service, listing_id)
    return build_responses(service, [listing])[0]


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    listing_data: ListingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Create a new listing."""
    listing = service.create_listing(current_user.id, _listing_fields(listing_data))
    return build_responses(service, [listing])[0]


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: int,
    listing_data: ListingUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Update a listing (seller only)."""
    listing = get_owned_listing(service, listing_id, current_user)
    listing = service.update_listing(listing, _listing_fields(listing_data, exclude_unset=True))
    return build_responses(service, [listing])[0]


@router.delete("/{listing_id}", response_model=MessageResponse)
async def delete_listing(
    listing_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Soft delete a listing (seller only)."""
    listing = get_owned_listing(service, listing_id, current_user)
    service.delete_listing(listing)
    return MessageResponse(message="Listing deleted successfully")


@router.post("/{listing_id}/view", response_model=ListingResponse)
async def record_view(
    listing_id: int,
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Increment a listing's view count."""
    listing = service.increment_views(listing_id)
    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return build_responses(service, [listing])[0]


@router.post("/{listing_id}/favorite", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    listing_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Favorite or unfavorite a listing."""
    get_visible_listing(service, listing_id)
    favorited = service.toggle_favorite(current_user.id, listing_id)
    return FavoriteToggleResponse(listing_id=listing_id, favorited=favorited)
