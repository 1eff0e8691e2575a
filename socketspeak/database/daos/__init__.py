"""
The `daos` package provides the Data Access Layer for the application.

It is responsible for all interactions with the database entities,
encapsulating CRUD operations that support the core functionality
of the system. Each DAO operates on a specific entity and abstracts
away the direct SQLAlchemy queries, offering a cleaner API to the
service layer (`database.core`). DAOs never open or commit sessions
themselves: the caller owns the transaction.

Contents
--------
- UserDao
    Handles user persistence:
    * Creates users from an already hashed password
    * Fetches users by id, email, or a list of ids
    * Searches users by email substring (case-insensitive)
    * Updates profile data and the private key

- MessageDao
    Manages direct message records:
    * Creates messages between a sender and a receiver
    * Fetches the messages of a user pair (chronological order)
    * Checks whether a pair has exchanged any message (first contact)
    * Derives the conversation partners of a user
    * Deletes one message, or a whole conversation in a single statement
"""

from socketspeak.database.daos.message_dao import MessageDao
from socketspeak.database.daos.user_dao import UserDao

__all__ = ["MessageDao", "UserDao"]
