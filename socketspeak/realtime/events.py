"""
Targeted fan-out of conversation events.

Each event goes to the one user who must observe it, never broadcast. The
sender of an action gets no echo here: it already has the HTTP response.
"""

import logging
from typing import Any

from socketspeak.realtime.registry import PresenceRegistry

log = logging.getLogger(__name__)

NEW_MESSAGE = "newMessage"
MESSAGE_DELETED = "messageDeleted"
CONVERSATION_DELETED = "conversationDeleted"
DOWNLOAD_IMAGE = "downloadImage"
IMAGE_DOWNLOAD = "imageDownload"
ERROR = "error"


async def notify_new_message(registry: PresenceRegistry, receiver_id, message: dict) -> bool:
    return await registry.emit(str(receiver_id), NEW_MESSAGE, message)


async def notify_message_deleted(registry: PresenceRegistry, other_party_id, message_id) -> bool:
    return await registry.emit(str(other_party_id), MESSAGE_DELETED, str(message_id))


async def notify_conversation_deleted(registry: PresenceRegistry, other_party_id, deleter_id) -> bool:
    return await registry.emit(str(other_party_id), CONVERSATION_DELETED, str(deleter_id))


async def relay_download(registry: PresenceRegistry, sender_id: str, data: dict[str, Any]) -> bool:
    """Forward a download-coordination payload verbatim to `data["recipientId"]`."""
    recipient_id = data.get("recipientId")
    if not recipient_id:
        log.debug("Download relay from %s without recipientId dropped", sender_id)
        return False
    return await registry.emit(str(recipient_id), IMAGE_DOWNLOAD, data)
