"""Livestream service backed by LiveKit rooms."""

import base64
import hashlib
import hmac
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.models.enums import LivestreamStatus
from src.models.livestream import Livestream
from src.models.user import User

logger = logging.getLogger(__name__)

ROOM_PREFIX = "livestream-"
ROOM_EMPTY_TIMEOUT_SECONDS = 5 * 60
ROOM_MAX_PARTICIPANTS = 500
HOST_SOURCES = ["camera", "microphone", "screen_share", "screen_share_audio"]


class WebhookVerificationError(Exception):
    """Raised when a webhook was not signed by our LiveKit project."""


class LiveKitClient:
    """Minimal LiveKit server client: RoomService over Twirp plus access tokens."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.api_key = self.settings.livekit_api_key
        self.api_secret = self.settings.livekit_api_secret
        self.base_url = self.settings.livekit_http_url
        self.timeout = 10.0

    def _sign(self, claims: dict[str, Any], ttl: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            "iss": self.api_key,
            "nbf": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            **claims,
        }
        return jwt.encode(payload, self.api_secret, algorithm="HS256")

    def access_token(self, room_name: str, identity: str, name: str, is_host: bool) -> str:
        """Participant token. Hosts may publish; viewers only subscribe."""
        grant = {
            "room": room_name,
            "roomJoin": True,
            "canPublish": is_host,
            "canPublishData": is_host,
            "canSubscribe": True,
            "canPublishSources": HOST_SOURCES if is_host else [],
        }
        return self._sign({"sub": identity, "name": name, "video": grant}, timedelta(hours=6))

    async def _room_service(self, method: str, body: dict[str, Any], grant: dict[str, Any]) -> dict[str, Any]:
        token = self._sign({"video": grant}, timedelta(minutes=10))
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/twirp/livekit.RoomService/{method}",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            return response.json()

    async def create_room(self, room_name: str) -> dict[str, Any]:
        return await self._room_service(
            "CreateRoom",
            {
                "name": room_name,
                "empty_timeout": ROOM_EMPTY_TIMEOUT_SECONDS,
                "max_participants": ROOM_MAX_PARTICIPANTS,
            },
            {"roomCreate": True},
        )

    async def delete_room(self, room_name: str) -> None:
        await self._room_service("DeleteRoom", {"room": room_name}, {"roomCreate": True})

    def verify_webhook(self, body: bytes, authorization: str | None) -> dict[str, Any]:
        """Check the signed Authorization JWT and the body digest it carries."""
        if not authorization:
            raise WebhookVerificationError("Missing authorization")
        token = authorization.removeprefix("Bearer ").strip()
        try:
            claims = jwt.decode(
                token,
                self.api_secret,
                algorithms=["HS256"],
                options={"verify_aud": False, "verify_sub": False},
            )
        except JWTError as e:
            raise WebhookVerificationError("Invalid signature") from e

        if claims.get("iss") != self.api_key:
            raise WebhookVerificationError("Unknown issuer")

        digest = base64.b64encode(hashlib.sha256(body).digest()).decode()
        if not hmac.compare_digest(str(claims.get("sha256", "")), digest):
            raise WebhookVerificationError("Body digest mismatch")
        return claims


def get_livekit_client() -> LiveKitClient:
    """Get a LiveKit client instance."""
    return LiveKitClient()


def room_name_to_id(room_name: str | None) -> int | None:
    """Map a room name back to a livestream id, or None for foreign rooms."""
    if not room_name or not room_name.startswith(ROOM_PREFIX):
        return None
    try:
        return int(room_name.removeprefix(ROOM_PREFIX))
    except ValueError:
        return None


class LivestreamService:
    """Service for livestream lifecycle."""

    def __init__(self, db: Session, livekit: LiveKitClient):
        self.db = db
        self.livekit = livekit

    def get_livestream(self, livestream_id: int) -> Livestream | None:
        return self.db.query(Livestream).filter(Livestream.id == livestream_id).first()

    def get_active(self) -> list[Livestream]:
        return (
            self.db.query(Livestream)
            .filter(Livestream.status == LivestreamStatus.LIVE)
            .order_by(Livestream.started_at.desc(), Livestream.id.desc())
            .all()
        )

    def get_live_for_user(self, user_id: int) -> Livestream | None:
        return (
            self.db.query(Livestream)
            .filter(Livestream.user_id == user_id, Livestream.status == LivestreamStatus.LIVE)
            .first()
        )

    async def start(self, host: User, title: str) -> tuple[Livestream, str]:
        """Create the row and its LiveKit room. Returns the stream and a host token.

        The row is only committed once the room exists.
        """
        livestream = Livestream(user_id=host.id, title=title, status=LivestreamStatus.LIVE)
        self.db.add(livestream)
        self.db.flush()

        try:
            await self.livekit.create_room(livestream.room_name)
        except httpx.HTTPError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(livestream)
        token = self.livekit.access_token(livestream.room_name, str(host.id), host.full_name, is_host=True)
        logger.info(f"User {host.id} started livestream {livestream.id}")
        return livestream, token

    def join(self, livestream: Livestream, viewer: User) -> str:
        """Count the viewer and issue their token. The host rejoins with publish rights."""
        is_host = livestream.user_id == viewer.id
        self._adjust_viewers(livestream.id, 1)
        self.db.refresh(livestream)
        return self.livekit.access_token(livestream.room_name, str(viewer.id), viewer.full_name, is_host)

    async def end(self, livestream: Livestream) -> Livestream:
        try:
            await self.livekit.delete_room(livestream.room_name)
        except httpx.HTTPError as e:
            # Room may already be gone once everyone left.
            logger.error(f"Error deleting LiveKit room {livestream.room_name}: {e}")

        self._mark_ended(livestream)
        self.db.commit()
        self.db.refresh(livestream)
        logger.info(f"Livestream {livestream.id} ended")
        return livestream

    def _mark_ended(self, livestream: Livestream) -> None:
        livestream.status = LivestreamStatus.ENDED
        livestream.ended_at = datetime.now(UTC)

    def _adjust_viewers(self, livestream_id: int, delta: int) -> None:
        query = self.db.query(Livestream).filter(Livestream.id == livestream_id)
        if delta < 0:
            query = query.filter(Livestream.viewer_count > 0)
        query.update({Livestream.viewer_count: Livestream.viewer_count + delta}, synchronize_session=False)
        self.db.commit()

    def handle_webhook_event(self, event: dict[str, Any]) -> None:
        """Apply a verified LiveKit webhook event. Unknown rooms and events are ignored."""
        livestream_id = room_name_to_id((event.get("room") or {}).get("name"))
        if livestream_id is None:
            return

        event_type = event.get("event")
        if event_type == "participant_joined":
            self._adjust_viewers(livestream_id, 1)
        elif event_type == "participant_left":
            self._adjust_viewers(livestream_id, -1)
        elif event_type == "room_finished":
            livestream = self.get_livestream(livestream_id)
            if livestream is None:
                return
            self._mark_ended(livestream)
            livestream.viewer_count = 0
            self.db.commit()
            logger.info(f"Livestream {livestream_id} finished by LiveKit")
