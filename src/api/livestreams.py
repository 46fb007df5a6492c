"""Livestream API endpoints."""

import json
import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from src.api.dependencies import get_current_user, get_livestream_service
from src.models.enums import LivestreamStatus
from src.models.livestream import Livestream
from src.models.user import User
from src.schemas.livestream import LivestreamCreate, LivestreamResponse, LivestreamSession, WebhookAck
from src.services.livestream import LivestreamService, WebhookVerificationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/livestreams", tags=["livestreams"])


def to_session(service: LivestreamService, livestream: Livestream, token: str) -> LivestreamSession:
    data = LivestreamResponse.model_validate(livestream).model_dump()
    return LivestreamSession(**data, token=token, livekit_url=service.livekit.settings.livekit_url)


def get_livestream_or_404(service: LivestreamService, livestream_id: int) -> Livestream:
    livestream = service.get_livestream(livestream_id)
    if not livestream:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Livestream not found")
    return livestream


@router.post("/webhook", response_model=WebhookAck)
async def livekit_webhook(
    request: Request,
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
    authorization: Annotated[str | None, Header()] = None,
):
    """Receive LiveKit room events."""
    body = await request.body()
    try:
        service.livekit.verify_webhook(body, authorization)
        event = json.loads(body)
        if not isinstance(event, dict):
            raise WebhookVerificationError("Webhook body must be an object")
    except (WebhookVerificationError, ValueError) as e:
        logger.warning(f"Rejected LiveKit webhook: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook") from e

    service.handle_webhook_event(event)
    return WebhookAck()


@router.post("", response_model=LivestreamSession, status_code=status.HTTP_201_CREATED)
async def start_livestream(
    livestream_data: LivestreamCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
):
    """Start a livestream. A user can only host one at a time."""
    if service.get_live_for_user(current_user.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have an active livestream",
        )

    try:
        livestream, token = await service.start(current_user, livestream_data.title)
    except httpx.HTTPError as e:
        logger.error(f"Failed to create LiveKit room for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to start livestream",
        ) from e
    return to_session(service, livestream, token)


@router.get("", response_model=list[LivestreamResponse])
async def get_active_livestreams(
    _: Annotated[User, Depends(get_current_user)],
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
):
    """Get all live streams, newest first."""
    return service.get_active()


@router.get("/{livestream_id}", response_model=LivestreamResponse)
async def get_livestream(
    livestream_id: int,
    _: Annotated[User, Depends(get_current_user)],
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
):
    """Get a specific livestream."""
    return get_livestream_or_404(service, livestream_id)


@router.post("/{livestream_id}/join", response_model=LivestreamSession)
async def join_livestream(
    livestream_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
):
    """Join a livestream as a viewer."""
    livestream = get_livestream_or_404(service, livestream_id)
    if livestream.status != LivestreamStatus.LIVE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Livestream has ended")

    token = service.join(livestream, current_user)
    return to_session(service, livestream, token)


@router.patch("/{livestream_id}/end", response_model=LivestreamResponse)
async def end_livestream(
    livestream_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[LivestreamService, Depends(get_livestream_service)],
):
    """End a livestream (host only)."""
    livestream = get_livestream_or_404(service, livestream_id)
    if livestream.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to end this livestream",
        )
    if livestream.status == LivestreamStatus.ENDED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Livestream has already ended",
        )
    return await service.end(livestream)
