import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from socketspeak.database.entities.base import Base, utc_now


class Message(Base):
    """A direct message between two users. Immutable once stored, except deletion."""

    __tablename__ = "message"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sender_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("app_user.id"), index=True)
    receiver_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("app_user.id"), index=True)
    text: Mapped[str] = mapped_column(Text, default="")
    images: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)

    def other_party(self, user_id: uuid.UUID) -> uuid.UUID:
        """The participant that is not `user_id`."""
        return self.receiver_id if self.sender_id == user_id else self.sender_id

    def __repr__(self) -> str:
        return f"Message(id={self.id!s}, sender_id={self.sender_id!s}, receiver_id={self.receiver_id!s})"
