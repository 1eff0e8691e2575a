import uuid
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from socketspeak.database.entities import User


class UserDao:
    """Data access for `User` rows. Every method works inside the caller's session."""

    @staticmethod
    def create(session: Session, full_name: str, email: str, password_hash: str) -> User:
        user = User(full_name=full_name, email=email, password=password_hash)
        session.add(user)
        session.flush()
        return user

    @staticmethod
    def get_by_id(session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    @staticmethod
    def get_by_email(session: Session, email: str) -> User | None:
        # emails are stored lowercased
        return session.scalar(select(User).where(User.email == email.lower()))

    @staticmethod
    def get_many(session: Session, user_ids: Iterable[uuid.UUID]) -> list[User]:
        """Fetch users by id, returned in the order of `user_ids`."""
        ids = list(user_ids)
        if not ids:
            return []
        found = {user.id: user for user in session.scalars(select(User).where(User.id.in_(ids)))}
        return [found[user_id] for user_id in ids if user_id in found]

    @staticmethod
    def search_by_email(session: Session, term: str, exclude_id: uuid.UUID) -> list[User]:
        """Case-insensitive substring match on email, LIKE wildcards in `term` escaped."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = (
            select(User)
            .where(User.email.ilike(f"%{escaped}%", escape="\\"))
            .where(User.id != exclude_id)
            .order_by(User.email)
        )
        return list(session.scalars(stmt))

    @staticmethod
    def update_private_key(session: Session, user: User, private_key: str) -> User:
        user.private_key = private_key
        user.private_key_set = True
        session.flush()
        return user

    @staticmethod
    def update_profile(session: Session, user: User, full_name: str | None = None, profile_pic: str | None = None) -> User:
        if full_name is not None:
            user.full_name = full_name
        if profile_pic is not None:
            user.profile_pic = profile_pic
        session.flush()
        return user
