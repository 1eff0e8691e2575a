"""
The `entities` package defines the ORM models of the application,
representing the database tables as Python classes via SQLAlchemy 2.0
typed mappings (`Mapped[...]` + `mapped_column(...)`, UUID primary keys,
timezone-aware UTC timestamps).

These entity classes are the foundation of the persistence layer,
used by DAOs (`daos` package) to perform CRUD operations.

Contents
--------
- User
    Represents a registered user in the system.
    * Stores credentials (bcrypt-hashed password) and display data
    * Holds the plain-text `private_key` shared secret and the
      `private_key_set` flag (False while the generated default is in use)

- Message
    Represents a single direct message between two users.
    * Stores sender, receiver, text and the ordered list of hosted image URLs
    * Records creation timestamp
    * A conversation is not stored: it is the set of messages whose
      sender/receiver pair matches two users in either direction
"""

from socketspeak.database.entities.base import Base
from socketspeak.database.entities.message import Message
from socketspeak.database.entities.user import User, generate_private_key

__all__ = ["Base", "Message", "User", "generate_private_key"]
