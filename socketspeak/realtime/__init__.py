"""
The `realtime` package implements the best-effort, online-only event channel.

Contents
--------
- registry
    * `PresenceRegistry` — user -> live connection table, presence broadcast
    * `ClientConnection` — one WebSocket and its connection state
- events
    * Targeted fan-out helpers for new messages, deleted messages,
      deleted conversations, and the download-coordination relay

Events are never queued: a user who is offline simply misses them and
re-fetches history from the REST API.
"""

from socketspeak.realtime.registry import ClientConnection, ConnectionState, PresenceRegistry

__all__ = ["ClientConnection", "ConnectionState", "PresenceRegistry"]
