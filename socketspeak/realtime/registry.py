"""
Presence Registry
-----------------
In-memory map user_id -> live connection, owned by the application (one
instance on ``app.state.presence``; nothing module-level).

  • One entry per user: a second connection from the same user replaces the
    first (last socket wins, no multi-device fan-out)
  • Every connect/disconnect broadcasts the full online-id list to all
    registered connections, the affected user included
  • Guarded removal: a connection only removes the entry that still points
    to it, so a replaced socket closing late does not evict the live one

Mutations run under one asyncio.Lock, so concurrent connects/disconnects are
applied one at a time. Frames are sent outside the lock from a snapshot of the
table, and every send is bounded by ``send_timeout``: a stalled socket delays
only its own delivery.

Delivery is best effort: a user without a connection is a no-op, and a failing
or timed-out send is logged and dropped. Nothing is queued or replayed; durable
history lives in the database.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

log = logging.getLogger(__name__)

ONLINE_USERS = "getOnlineUsers"
DEFAULT_SEND_TIMEOUT = 5.0


class Socket(Protocol):
    async def send_json(self, data: Any) -> None: ...


class ConnectionState(enum.Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


def frame(event: str, data: Any) -> Dict[str, Any]:
    """Wire shape of every realtime message."""
    return {"event": event, "data": data}


@dataclass(eq=False)
class ClientConnection:
    websocket: Socket
    user_id: str
    state: ConnectionState = ConnectionState.CONNECTING
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def send(self, event: str, data: Any) -> None:
        async with self.send_lock:
            await self.websocket.send_json(frame(event, data))


class PresenceRegistry:
    """Owned, concurrency-safe user -> connection table."""

    def __init__(self, send_timeout: float = DEFAULT_SEND_TIMEOUT) -> None:
        self._connections: Dict[str, ClientConnection] = {}
        self._lock = asyncio.Lock()
        self.send_timeout = send_timeout

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, conn: ClientConnection) -> None:
        async with self._lock:
            previous = self._connections.get(conn.user_id)
            self._connections[conn.user_id] = conn
            conn.state = ConnectionState.CONNECTED
            if previous is not None and previous is not conn:
                log.info("User %s reconnected; replacing previous connection", conn.user_id)
            else:
                log.info("User %s connected", conn.user_id)
            targets, online = self._snapshot()
        await self._send_all(targets, ONLINE_USERS, online)

    async def disconnect(self, conn: ClientConnection) -> None:
        async with self._lock:
            conn.state = ConnectionState.DISCONNECTED
            if self._connections.get(conn.user_id) is conn:
                del self._connections[conn.user_id]
                log.info("User %s disconnected", conn.user_id)
            else:
                log.debug("Stale connection of %s closed; registry entry kept", conn.user_id)
            targets, online = self._snapshot()
        await self._send_all(targets, ONLINE_USERS, online)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, user_id: str) -> Optional[ClientConnection]:
        return self._connections.get(str(user_id))

    def online_user_ids(self) -> List[str]:
        return list(self._connections)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def emit(self, user_id: str, event: str, data: Any) -> bool:
        """Send to one user's connection. Returns False when nothing was delivered."""
        conn = self.get(user_id)
        if conn is None:
            log.debug("Dropped %s for offline user %s", event, user_id)
            return False
        return await self._send(conn, event, data)

    async def broadcast(self, event: str, data: Any) -> None:
        async with self._lock:
            targets, _ = self._snapshot()
        await self._send_all(targets, event, data)

    def _snapshot(self):
        return list(self._connections.values()), list(self._connections)

    async def _send_all(self, targets: List[ClientConnection], event: str, data: Any) -> None:
        await asyncio.gather(*(self._send(conn, event, data) for conn in targets))

    async def _send(self, conn: ClientConnection, event: str, data: Any) -> bool:
        try:
            await asyncio.wait_for(conn.send(event, data), self.send_timeout)
            return True
        except asyncio.TimeoutError:
            log.warning("Timed out delivering %s to %s after %.1fs", event, conn.user_id, self.send_timeout)
            return False
        except Exception:
            log.warning("Failed to deliver %s to %s", event, conn.user_id, exc_info=True)
            return False
