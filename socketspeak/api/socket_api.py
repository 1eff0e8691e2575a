"""
FastAPI WebSocket endpoint for the realtime channel.

A client opens ``/ws`` with its session token (cookie or bearer header), is
registered in the presence registry under its user id, and then receives
`getOnlineUsers`, `newMessage`, `messageDeleted`, `conversationDeleted` and
`imageDownload` events. The only inbound event is `downloadImage`, relayed
verbatim to its `recipientId`.
"""

import logging
from typing import Optional

import anyio
import pydantic
from fastapi import APIRouter, Cookie, Header, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from socketspeak.api.models import ClientFrame
from socketspeak.api.utils import extract_token, resolve_user
from socketspeak.realtime import ClientConnection, PresenceRegistry, events

log = logging.getLogger(__name__)

router = APIRouter()


async def handle_client_frame(registry: PresenceRegistry, conn: ClientConnection, raw: str) -> None:
    try:
        client_frame = ClientFrame.model_validate_json(raw)
    except pydantic.ValidationError:
        await conn.send(events.ERROR, {"message": "invalid frame"})
        return

    if client_frame.event == events.DOWNLOAD_IMAGE:
        await events.relay_download(registry, conn.user_id, client_frame.data)
    else:
        await conn.send(events.ERROR, {"message": f"unknown event {client_frame.event}"})


async def receive_frame(websocket: WebSocket) -> Optional[str]:
    """Next text frame, or None for a binary one. Raises WebSocketDisconnect on close."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", status.WS_1000_NORMAL_CLOSURE), reason=message.get("reason"))
    return message.get("text")


async def release_connection(registry: PresenceRegistry, conn: ClientConnection) -> None:
    # runs on cancelled handlers too; the removal and its broadcast must both happen
    with anyio.CancelScope(shield=True):
        await registry.disconnect(conn)


@router.websocket("/ws")
async def realtime_channel(
    websocket: WebSocket,
    token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
):
    user = await run_in_threadpool(resolve_user, extract_token(token, authorization))
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    registry: PresenceRegistry = websocket.app.state.presence
    conn = ClientConnection(websocket=websocket, user_id=str(user.id))
    await registry.connect(conn)
    try:
        while True:
            raw = await receive_frame(websocket)
            if raw is None:
                log.debug("Binary frame from %s rejected", conn.user_id)
                await conn.send(events.ERROR, {"message": "binary frames are not supported"})
                continue
            await handle_client_frame(registry, conn, raw)
    except WebSocketDisconnect:
        pass
    finally:
        await release_connection(registry, conn)
