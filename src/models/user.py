"""User model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import UserType
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User account with credentials and profile fields.

    Verification and password-reset tokens live on the row itself: at most one
    of each is active, and issuing a new one overwrites the previous value.
    The reset token is stored as a keyed digest, never the raw value.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    user_type = Column(String(20), nullable=False, default=UserType.STUDENT)

    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(64), nullable=True, index=True)
    verification_token_expires_at = Column(DateTime(timezone=True), nullable=True)

    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Profile
    profile_picture = Column(String(500), nullable=True)
    bio = Column(String(250), nullable=True)
    city = Column(String(50), nullable=True)
    websites = Column(JSON, nullable=True)

    # Owned records are removed together with the account
    events = relationship("Event", back_populates="creator", cascade="all, delete-orphan")
    listings = relationship("Listing", back_populates="seller", cascade="all, delete-orphan")
    favorites = relationship("ListingFavorite", back_populates="user", cascade="all, delete-orphan")
    posts = relationship("Post", back_populates="user", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    livestreams = relationship("Livestream", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
