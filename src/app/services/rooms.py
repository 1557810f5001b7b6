"""Room registry for realtime subscriptions.

Rooms are named channels; a connection joins any number of them and is
removed from all of them on disconnect. Broadcast content is decided by the
publishers.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class RoomConnection(Protocol):
    async def send_json(self, data: Any) -> None: ...


def farm_room(farm_id: str) -> str:
    return f"farm-{farm_id}"


def weather_room(lat: float, lng: float) -> str:
    return f"weather-{lat}-{lng}"


def marketplace_room(region: str) -> str:
    return f"marketplace-{region}"


def notifications_room(uid: str) -> str:
    return f"notifications-{uid}"


class RoomHub:
    """Connections grouped by room name."""

    def __init__(self) -> None:
        self._rooms: defaultdict[str, set[RoomConnection]] = defaultdict(set)

    def join(self, room: str, connection: RoomConnection) -> None:
        self._rooms[room].add(connection)

    def leave_all(self, connection: RoomConnection) -> list[str]:
        """Remove the connection everywhere; return the rooms it left."""
        left = [room for room, members in self._rooms.items() if connection in members]
        for room in left:
            self._rooms[room].discard(connection)
            if not self._rooms[room]:
                del self._rooms[room]
        return left

    def member_count(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    def rooms_of(self, connection: RoomConnection) -> list[str]:
        return [room for room, members in self._rooms.items() if connection in members]

    async def broadcast(self, room: str, payload: Any) -> int:
        """Send ``payload`` to every member; dead connections are dropped.

        Returns:
            Number of successful deliveries.
        """
        delivered = 0
        for connection in list(self._rooms.get(room, ())):
            try:
                await connection.send_json(payload)
            except Exception as exc:
                logger.warning(
                    "room_broadcast_failed",
                    extra={"room": room, "error_type": type(exc).__name__},
                )
                self.leave_all(connection)
            else:
                delivered += 1
        return delivered
