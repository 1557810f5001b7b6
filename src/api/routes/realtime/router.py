"""WebSocket endpoint for room subscriptions.

Clients send ``{"event": ..., "data": ...}`` frames; each subscription
event joins one room and is acknowledged with ``{"event": "joined",
"room": ...}``. Broadcast content is produced elsewhere through
``RoomHub.broadcast``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.rooms import farm_room, marketplace_room, notifications_room, weather_room

if TYPE_CHECKING:
    from app.domain.claims import Claims

logger = logging.getLogger(__name__)

router = APIRouter()


class SubscriptionRejected(ValueError):
    """Frame names an unknown event or carries unusable data."""


def _scalar(data: Any, key: str) -> str:
    value = data.get(key) if isinstance(data, dict) else data
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise SubscriptionRejected(f"{key} is required")
    return value.strip()


def _join_farm(data: Any, claims: Claims | None) -> str:
    return farm_room(_scalar(data, "farmId"))


def _subscribe_weather(data: Any, claims: Claims | None) -> str:
    if not isinstance(data, dict):
        raise SubscriptionRejected("lat and lng are required")
    try:
        return weather_room(float(data["lat"]), float(data["lng"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise SubscriptionRejected("lat and lng are required") from exc


def _subscribe_marketplace(data: Any, claims: Claims | None) -> str:
    return marketplace_room(_scalar(data, "region"))


def _subscribe_notifications(data: Any, claims: Claims | None) -> str:
    uid = _scalar(data, "userId")
    if claims is None or claims.uid != uid:
        raise SubscriptionRejected("notifications are only available for the authenticated user")
    return notifications_room(uid)


SUBSCRIPTIONS: dict[str, Callable[[Any, Claims | None], str]] = {
    "join-farm": _join_farm,
    "subscribe-weather": _subscribe_weather,
    "subscribe-marketplace": _subscribe_marketplace,
    "subscribe-notifications": _subscribe_notifications,
}


def resolve_room(frame: Any, claims: Claims | None) -> str:
    """Map a client frame to the room it subscribes to."""
    if not isinstance(frame, dict):
        raise SubscriptionRejected("frame must be an object")
    handler = SUBSCRIPTIONS.get(frame.get("event"))
    if handler is None:
        raise SubscriptionRejected(f"unknown event: {frame.get('event')}")
    return handler(frame.get("data"), claims)


@router.websocket("/ws")
async def room_socket(websocket: WebSocket) -> None:
    services = websocket.app.state.container
    token = websocket.query_params.get("token")
    claims = await services.verifier.verify(f"Bearer {token}" if token else None, optional=True)

    await websocket.accept()
    logger.info("socket_connected", extra={"uid": claims.uid if claims else None})
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                room = resolve_room(json.loads(raw), claims)
            except json.JSONDecodeError:
                await websocket.send_json({"event": "error", "message": "frame must be JSON"})
                continue
            except SubscriptionRejected as exc:
                await websocket.send_json({"event": "error", "message": str(exc)})
                continue
            services.rooms.join(room, websocket)
            logger.info("socket_joined_room", extra={"room": room})
            await websocket.send_json({"event": "joined", "room": room})
    except WebSocketDisconnect:
        pass
    finally:
        left = services.rooms.leave_all(websocket)
        logger.info("socket_disconnected", extra={"rooms_left": len(left)})
