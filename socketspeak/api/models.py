"""
Pydantic schemas for request/response validation.

JSON keys are camelCase (``privateKey``, ``senderId``...) through an alias
generator; Python code uses the snake_case attribute names.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SignupData(CamelModel):
    full_name: str
    email: str
    password: str


class UserCredentials(CamelModel):
    email: str
    password: str


class ProfileUpdate(CamelModel):
    profile_pic: Optional[str] = None
    """Data-URL of the new picture, uploaded to the image host."""
    full_name: Optional[str] = None


class UserProfile(CamelModel):
    """A user as other users see it: no password, no private key."""

    id: uuid.UUID
    email: str
    full_name: str
    profile_pic: str = ""
    private_key_set: bool = False
    created_at: Optional[datetime] = None


class OwnProfile(UserProfile):
    """A user as its owner sees it, including the current private key."""

    private_key: str


class PrivateKeyUpdate(CamelModel):
    private_key: Optional[str] = None


class PrivateKeyCandidate(CamelModel):
    private_key: Optional[str] = None


class KeyVerification(CamelModel):
    message: str
    is_valid: bool
    verified_key: Optional[str] = None


class SendMessageRequest(CamelModel):
    text: str = ""
    images: List[str] = Field(default_factory=list)
    """Data-URLs (or URLs) of the images to attach."""
    private_key: Optional[str] = None
    """Receiver's key; required for a first contact when the receiver has set one."""


class MessageOut(CamelModel):
    id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    text: str
    images: List[str]
    created_at: datetime


class StatusMessage(CamelModel):
    message: str


class ConversationDeleted(CamelModel):
    message: str
    count: int


class ClientFrame(BaseModel):
    """Inbound realtime frame: ``{"event": ..., "data": {...}}``."""

    event: str
    data: Dict[str, Any] = Field(default_factory=dict)
