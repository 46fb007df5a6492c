"""Marketplace listing models."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import ListingStatus
from src.models.mixins import CreatedAtMixin, TimestampMixin


class Listing(Base, TimestampMixin):
    """An item for sale in the campus marketplace."""

    __tablename__ = "marketplace_listings"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(2000), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    condition = Column(String(20), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    location = Column(String(200), nullable=False)
    views = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=ListingStatus.ACTIVE, index=True)
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    seller = relationship("User", back_populates="listings")
    favorited_by = relationship("ListingFavorite", back_populates="listing", cascade="all, delete-orphan")


class ListingFavorite(Base, CreatedAtMixin):
    """A user's saved listing."""

    __tablename__ = "marketplace_favorites"
    __table_args__ = (UniqueConstraint("user_id", "listing_id", name="uq_favorite_user_listing"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column(
        Integer, ForeignKey("marketplace_listings.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user = relationship("User", back_populates="favorites")
    listing = relationship("Listing", back_populates="favorited_by")
