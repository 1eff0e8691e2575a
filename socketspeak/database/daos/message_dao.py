import uuid

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.orm import Session

from socketspeak.database.entities import Message


def between(user_a: uuid.UUID, user_b: uuid.UUID):
    """Filter matching the messages of the pair {user_a, user_b}, in either direction."""
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


class MessageDao:
    """Data access for `Message` rows. Every method works inside the caller's session."""

    @staticmethod
    def create(session: Session, sender_id: uuid.UUID, receiver_id: uuid.UUID, text: str, images: list[str]) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, text=text, images=list(images))
        session.add(message)
        session.flush()
        session.refresh(message)
        return message

    @staticmethod
    def get_by_id(session: Session, message_id: uuid.UUID) -> Message | None:
        return session.get(Message, message_id)

    @staticmethod
    def exists_between(session: Session, user_a: uuid.UUID, user_b: uuid.UUID) -> bool:
        return session.scalar(select(Message.id).where(between(user_a, user_b)).limit(1)) is not None

    @staticmethod
    def get_between(session: Session, user_a: uuid.UUID, user_b: uuid.UUID) -> list[Message]:
        stmt = select(Message).where(between(user_a, user_b)).order_by(Message.created_at)
        return list(session.scalars(stmt))

    @staticmethod
    def partner_ids(session: Session, user_id: uuid.UUID) -> list[uuid.UUID]:
        """Distinct ids of everyone `user_id` exchanged messages with, first-seen order."""
        stmt = (
            select(Message.sender_id, Message.receiver_id)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at)
        )
        partners: dict[uuid.UUID, None] = {}
        for sender_id, receiver_id in session.execute(stmt):
            other = receiver_id if sender_id == user_id else sender_id
            partners.setdefault(other, None)
        return list(partners)

    @staticmethod
    def delete(session: Session, message: Message) -> None:
        session.delete(message)
        session.flush()

    @staticmethod
    def delete_between(session: Session, user_a: uuid.UUID, user_b: uuid.UUID) -> int:
        """Bulk-delete the pair's messages in one statement; returns the removed count."""
        result = session.execute(delete(Message).where(between(user_a, user_b)))
        return result.rowcount
