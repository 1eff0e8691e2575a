import secrets
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from socketspeak.database.entities.base import Base, utc_now

PRIVATE_KEY_BYTES = 4
"""Random bytes behind a generated private key (8 hex characters)."""


def generate_private_key() -> str:
    """Return a fresh random private key, e.g. ``'9f3a0c1b'``."""
    return secrets.token_hex(PRIVATE_KEY_BYTES)


class User(Base):
    """
    A registered user.

    `private_key` is a plain-text shared secret: a would-be first contact must
    present it before their first message is accepted. It is never empty; a
    random key is generated per user at creation and `private_key_set` stays
    False until the owner chooses or rotates one.
    """

    __tablename__ = "app_user"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(120))
    password: Mapped[str] = mapped_column(String(255))
    profile_pic: Mapped[str] = mapped_column(String(1024), default="")
    private_key: Mapped[str] = mapped_column(String(255), default=generate_private_key)
    private_key_set: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"User(id={self.id!s}, email={self.email!r})"
