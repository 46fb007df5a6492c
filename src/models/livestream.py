"""Livestream model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import LivestreamStatus


class Livestream(Base):
    """A live video session hosted in a LiveKit room."""

    __tablename__ = "livestreams"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    status = Column(String(10), nullable=False, default=LivestreamStatus.LIVE, index=True)
    viewer_count = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="livestreams")

    @property
    def room_name(self) -> str:
        return f"livestream-{self.id}"
