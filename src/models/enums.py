"""Enums for model fields."""

from enum import StrEnum


class UserType(StrEnum):
    """Account types. Registration always assigns STUDENT."""

    STUDENT = "student"
    FACULTY = "faculty"
    STAFF = "staff"
    ADMIN = "admin"


class ListingCategory(StrEnum):
    """Marketplace listing categories."""

    TEXTBOOKS = "textbooks"
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    CLOTHING = "clothing"
    ACCESSORIES = "accessories"
    OTHER = "other"


class ItemCondition(StrEnum):
    """Condition of a marketplace item."""

    LIKE_NEW = "likeNew"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ListingStatus(StrEnum):
    """Lifecycle of a marketplace listing."""

    ACTIVE = "active"
    SOLD = "sold"
    INACTIVE = "inactive"
    DELETED = "deleted"

    def is_visible(self) -> bool:
        """Check if listings with this status can be fetched by id."""
        return self != ListingStatus.DELETED


class LivestreamStatus(StrEnum):
    """Livestream states."""

    LIVE = "LIVE"
    ENDED = "ENDED"
