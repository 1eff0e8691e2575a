"""
Conversation store: direct messages between user pairs.

A conversation has no row of its own; it is the set of messages whose
sender/receiver pair matches two users in either direction.
"""

import logging
import uuid

from socketspeak.database.core import errors
from socketspeak.database.core.access_gate import check_first_contact
from socketspeak.database.core.db import get_session
from socketspeak.database.daos import MessageDao, UserDao
from socketspeak.database.entities import Message, User

log = logging.getLogger(__name__)


def list_conversation_partners(user_id: uuid.UUID) -> list[User]:
    """Everyone `user_id` has exchanged at least one message with."""
    with get_session() as session:
        partner_ids = MessageDao.partner_ids(session, user_id)
        return UserDao.get_many(session, partner_ids)


def get_messages(user_id: uuid.UUID, other_id: uuid.UUID) -> list[Message]:
    """Messages between the two users, both directions, in creation order."""
    with get_session() as session:
        return MessageDao.get_between(session, user_id, other_id)


def authorize_send(sender_id: uuid.UUID, receiver_id: uuid.UUID, private_key: str | None = None) -> User:
    """
    Run the receiver lookup and the Access-Gate without persisting anything.

    Used before uploading images so a rejected first contact never reaches the
    image host. Returns the receiver.
    """
    with get_session() as session:
        receiver = UserDao.get_by_id(session, receiver_id)
        if receiver is None:
            raise errors.NotFound("Receiver not found")
        check_first_contact(session, sender_id, receiver, private_key)
    return receiver


def create_message(
    sender_id: uuid.UUID,
    receiver_id: uuid.UUID,
    text: str,
    image_urls: list[str],
    private_key: str | None = None,
) -> Message:
    """
    Persist a message after checking the receiver and the Access-Gate.

    Raises
    ------
    errors.NotFound
        The receiver does not exist.
    errors.Unauthorized
        First contact without the receiver's key (`requiresKey=True`).
    """
    with get_session() as session:
        receiver = UserDao.get_by_id(session, receiver_id)
        if receiver is None:
            raise errors.NotFound("Receiver not found")
        check_first_contact(session, sender_id, receiver, private_key)
        message = MessageDao.create(session, sender_id, receiver_id, text=text or "", images=image_urls)
    log.debug("Stored message %s from %s to %s", message.id, sender_id, receiver_id)
    return message


def delete_message(requester_id: uuid.UUID, message_id: uuid.UUID) -> Message:
    """Delete a message permanently. Only its sender may do so. Returns the deleted row."""
    with get_session() as session:
        message = MessageDao.get_by_id(session, message_id)
        if message is None:
            raise errors.NotFound("Message not found")
        if message.sender_id != requester_id:
            raise errors.Unauthorized("You can only delete your own messages")
        MessageDao.delete(session, message)
    log.info("Message %s deleted by %s", message_id, requester_id)
    return message


def delete_conversation(user_id: uuid.UUID, other_id: uuid.UUID) -> int:
    """Delete every message between the pair as one transaction; returns the count."""
    with get_session() as session:
        count = MessageDao.delete_between(session, user_id, other_id)
    log.info("Conversation %s <-> %s deleted (%d messages)", user_id, other_id, count)
    return count
