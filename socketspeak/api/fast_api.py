"""
FastAPI Router: Authentication, Users, Private Keys, and Direct Messages

This module defines the HTTP API endpoints exposed by the backend. It handles:
- User signup, login, logout, session check and profile update
- Conversation partners, message history, sending and deleting messages
- User search by email
- Private key set / rotation / verification (first-contact gate)

Each endpoint validates input via Pydantic models and returns structured responses.
Service errors raised by `database.core` are rendered by the exception handler
registered in `socketspeak.main`.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from socketspeak.api.models import (
    ConversationDeleted,
    KeyVerification,
    MessageOut,
    OwnProfile,
    PrivateKeyCandidate,
    PrivateKeyUpdate,
    ProfileUpdate,
    SendMessageRequest,
    SignupData,
    StatusMessage,
    UserCredentials,
    UserProfile,
)
from socketspeak.api.utils import TOKEN_COOKIE, create_access_token, get_current_user, set_token_cookie
from socketspeak.database.core import access_gate, conversations, errors, keys
from socketspeak.database.core.funcs import (
    authenticate_user,
    create_user,
    search_users_by_email,
    update_profile,
)
from socketspeak.database.entities import User
from socketspeak.media.images import upload_images, upload_profile_picture
from socketspeak.realtime import events

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


def _presence(request: Request):
    return request.app.state.presence


# ----------------------------------------------------------------------
# Authentication
# ----------------------------------------------------------------------

@router.post("/auth/signup", response_model=OwnProfile, status_code=201)
def signup(data: SignupData, response: Response):
    """
    Register a new account and open a session.

    Request Body
    ------------
    SignupData {fullName: str, email: str, password: str}

    Returns
    -------
    OwnProfile
        The new user, including its generated private key.

    Raises
    ------
    400
        Missing field, malformed email, short password or duplicate email.
    """
    user = create_user(full_name=data.full_name, email=data.email, password=data.password)
    set_token_cookie(response, create_access_token({"sub": str(user.id)}))
    return user


@router.post("/auth/login", response_model=OwnProfile)
def login(data: UserCredentials, response: Response):
    """
    Authenticate a user and set JWT as cookie.

    Request Body
    ------------
    UserCredentials {email: str, password: str}

    Raises
    ------
    401
        If authentication fails.
    """
    user = authenticate_user(email=data.email, password=data.password)
    set_token_cookie(response, create_access_token({"sub": str(user.id)}))
    return user


@router.post("/auth/logout", response_model=StatusMessage)
def logout(response: Response):
    """Logout user by clearing JWT cookie."""
    response.delete_cookie(key=TOKEN_COOKIE)
    return {"message": "Logged out successfully"}


@router.get("/auth/check", response_model=OwnProfile)
def check_auth(user: User = Depends(get_current_user)):
    """Return the profile behind the current session."""
    return user


@router.put("/auth/update-profile", response_model=OwnProfile)
async def update_user_profile(data: ProfileUpdate, user: User = Depends(get_current_user)):
    """
    Update the profile picture and/or display name.

    Request Body
    ------------
    ProfileUpdate {profilePic: str|None (data-URL), fullName: str|None}
    """
    profile_pic_url = None
    if data.profile_pic:
        profile_pic_url = await run_in_threadpool(upload_profile_picture, data.profile_pic, user.id)
    return await run_in_threadpool(update_profile, user.id, full_name=data.full_name, profile_pic_url=profile_pic_url)


# ----------------------------------------------------------------------
# Messages
# ----------------------------------------------------------------------

@router.get("/messages/users", response_model=List[UserProfile])
def get_conversation_partners(user: User = Depends(get_current_user)):
    """
    List everyone the current user has exchanged messages with (sidebar).

    Returns
    -------
    list[UserProfile]
        Profiles without password or private key.
    """
    return conversations.list_conversation_partners(user.id)


@router.get("/messages/{user_id}", response_model=List[MessageOut])
def get_messages(user_id: uuid.UUID, user: User = Depends(get_current_user)):
    """
    Fetch the messages between the current user and `user_id`.

    Returns
    -------
    list[MessageOut]
        Both directions, in creation order.
    """
    return conversations.get_messages(user.id, user_id)


@router.post("/messages/send/{receiver_id}", response_model=MessageOut, status_code=201)
async def send_message(receiver_id: uuid.UUID, data: SendMessageRequest, request: Request, user: User = Depends(get_current_user)):
    """
    Send a message, uploading its images first.

    Request Body
    ------------
    SendMessageRequest {text: str, images: list[str], privateKey: str|None}

    Returns
    -------
    MessageOut
        The stored message. The receiver also gets it as a `newMessage`
        event when connected.

    Raises
    ------
    400
        Neither text nor images.
    403
        First contact without the receiver's key; body carries `requiresKey: true`.
    404
        Unknown receiver.
    502
        Every image upload failed.
    """
    if not data.text.strip() and not data.images:
        raise errors.ValidationError("Message must contain text or at least one image")

    await run_in_threadpool(conversations.authorize_send, user.id, receiver_id, data.private_key)
    image_urls = []
    if data.images:
        image_urls = await run_in_threadpool(upload_images, data.images, f"socketspeak/{user.id}")

    message = await run_in_threadpool(
        conversations.create_message,
        user.id,
        receiver_id,
        text=data.text,
        image_urls=image_urls,
        private_key=data.private_key,
    )
    payload = MessageOut.model_validate(message)
    await events.notify_new_message(_presence(request), receiver_id, payload.model_dump(mode="json", by_alias=True))
    return payload


@router.delete("/messages/conversation/{user_id}", response_model=ConversationDeleted)
async def delete_conversation(user_id: uuid.UUID, request: Request, user: User = Depends(get_current_user)):
    """
    Delete every message between the current user and `user_id`.

    Returns
    -------
    ConversationDeleted {message: str, count: int}
    """
    count = await run_in_threadpool(conversations.delete_conversation, user.id, user_id)
    await events.notify_conversation_deleted(_presence(request), user_id, user.id)
    return {"message": "Conversation deleted successfully", "count": count}


@router.delete("/messages/{message_id}", response_model=StatusMessage)
async def delete_message(message_id: uuid.UUID, request: Request, user: User = Depends(get_current_user)):
    """
    Delete one of the current user's own messages.

    Raises
    ------
    403
        The current user is not the sender.
    404
        Unknown message.
    """
    message = await run_in_threadpool(conversations.delete_message, user.id, message_id)
    await events.notify_message_deleted(_presence(request), message.other_party(user.id), message.id)
    return {"message": "Message deleted successfully"}


# ----------------------------------------------------------------------
# Users & private keys
# ----------------------------------------------------------------------

@router.get("/users/search", response_model=List[UserProfile])
def search_users(email: str = "", user: User = Depends(get_current_user)):
    """
    Search users by email substring (case-insensitive), excluding the caller.

    Query Parameters
    ----------------
    email : str
        Part of the email to look for.
    """
    return search_users_by_email(email, exclude_id=user.id)


@router.put("/users/private-key", response_model=OwnProfile)
def set_private_key(data: PrivateKeyUpdate, user: User = Depends(get_current_user)):
    """
    Choose a private key (at least 4 characters).

    Request Body
    ------------
    PrivateKeyUpdate {privateKey: str}
    """
    return keys.set_private_key(user.id, data.private_key)


@router.post("/users/generate-private-key", response_model=OwnProfile)
def generate_private_key(user: User = Depends(get_current_user)):
    """Replace the private key with a random one."""
    return keys.rotate_private_key(user.id)


@router.post("/users/verify-private-key/{user_id}", response_model=KeyVerification)
def verify_private_key(user_id: uuid.UUID, data: PrivateKeyCandidate, user: User = Depends(get_current_user)):
    """
    Check a key against the current key of `user_id` before composing a message.

    Request Body
    ------------
    PrivateKeyCandidate {privateKey: str}

    Returns
    -------
    KeyVerification
        {message, isValid: true, verifiedKey} where `verifiedKey` is the
        stored key, for the client to cache and send with the first message.

    Raises
    ------
    400 / 403 / 404
        Missing key, wrong key, unknown user; each body carries `isValid: false`.
    """
    verified = access_gate.verify_private_key(user_id, data.private_key)
    return KeyVerification(message="Private key verified successfully", is_valid=True, verified_key=verified.key)
