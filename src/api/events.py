"""Event API endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.event import Event
from src.models.user import User
from src.schemas.event import EventCreate, EventResponse

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new event."""
    event = Event(
        title=event_data.title,
        description=event_data.description,
        start_date=event_data.start_date,
        end_date=event_data.end_date,
        location=event_data.location,
        banner=str(event_data.banner) if event_data.banner else None,
        created_by_id=current_user.id,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.get("", response_model=list[EventResponse])
async def get_events(
    db: Annotated[Session, Depends(get_db)],
    include_past: Annotated[bool, Query(alias="includePast")] = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
):
    """List events ordered by start date. Past events are hidden by default."""
    query = db.query(Event)
    if not include_past:
        query = query.filter(Event.end_date >= datetime.now(UTC))
    return query.order_by(Event.start_date.asc()).limit(limit).all()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific event."""
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event
