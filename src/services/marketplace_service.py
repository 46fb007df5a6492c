"""Marketplace service for listings and favorites."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from src.models.enums import ListingStatus
from src.models.listing import Listing, ListingFavorite

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "recent": Listing.created_at.desc(),
    "price-low": Listing.price.asc(),
    "price-high": Listing.price.desc(),
    "popular": Listing.views.desc(),
}


@dataclass
class ListingFilters:
    """Filters, sort and paging for browsing listings."""

    category: str | None = None
    condition: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None
    seller_id: int | None = None
    status: str = ListingStatus.ACTIVE
    sort_by: str = "recent"
    limit: int | None = None
    offset: int | None = None


class MarketplaceService:
    """Service for marketplace operations."""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self):
        return self.db.query(Listing).options(joinedload(Listing.seller))

    def list_listings(self, filters: ListingFilters) -> list[Listing]:
        """Browse listings with filters, sorting and pagination."""
        query = self._base_query().filter(Listing.status == filters.status)

        if filters.category:
            query = query.filter(Listing.category == filters.category)
        if filters.condition:
            query = query.filter(Listing.condition == filters.condition)
        if filters.seller_id is not None:
            query = query.filter(Listing.seller_id == filters.seller_id)
        if filters.min_price is not None:
            query = query.filter(Listing.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Listing.price <= filters.max_price)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            query = query.filter(
                or_(Listing.title.ilike(pattern), Listing.description.ilike(pattern))
            )

        query = query.order_by(SORT_ORDERS.get(filters.sort_by, SORT_ORDERS["recent"]), Listing.id.desc())
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit:
            query = query.limit(filters.limit)
        return query.all()

    def get_listing(self, listing_id: int) -> Listing | None:
        return self._base_query().filter(Listing.id == listing_id).first()

    def create_listing(self, seller_id: int, data: dict[str, Any]) -> Listing:
        listing = Listing(seller_id=seller_id, **data)
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        logger.info(f"Created listing {listing.id} for seller {seller_id}")
        return listing

    def update_listing(self, listing: Listing, data: dict[str, Any]) -> Listing:
        for field, value in data.items():
            setattr(listing, field, value)
        self.db.commit()
        self.db.refresh(listing)
        return listing

    def delete_listing(self, listing: Listing) -> None:
        """Soft delete: the row stays, hidden behind the deleted status."""
        listing.status = ListingStatus.DELETED
        self.db.commit()

    def increment_views(self, listing_id: int) -> Listing | None:
        """Atomically bump the view counter."""
        updated = (
            self.db.query(Listing)
            .filter(Listing.id == listing_id)
            .update({Listing.views: Listing.views + 1}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            return None
        listing = self.get_listing(listing_id)
        self.db.refresh(listing)
        return listing

    def toggle_favorite(self, user_id: int, listing_id: int) -> bool:
        """Add or remove a favorite. Returns True if the listing is now favorited."""
        existing = (
            self.db.query(ListingFavorite)
            .filter(ListingFavorite.user_id == user_id, ListingFavorite.listing_id == listing_id)
            .first()
        )
        if existing:
            self.db.delete(existing)
            self.db.commit()
            return False

        self.db.add(ListingFavorite(user_id=user_id, listing_id=listing_id))
        self.db.commit()
        return True

    def get_user_favorites(self, user_id: int) -> list[Listing]:
        return (
            self._base_query()
            .join(ListingFavorite, ListingFavorite.listing_id == Listing.id)
            .filter(ListingFavorite.user_id == user_id)
            .order_by(ListingFavorite.created_at.desc())
            .all()
        )

    def favorite_counts(self, listing_ids: list[int]) -> dict[int, int]:
        """Favorite counts for several listings in one query."""
        if not listing_ids:
            return {}
        counts = (
            self.db.query(ListingFavorite.listing_id, func.count(ListingFavorite.id))
            .filter(ListingFavorite.listing_id.in_(listing_ids))
            .group_by(ListingFavorite.listing_id)
            .all()
        )
        return dict(counts)
