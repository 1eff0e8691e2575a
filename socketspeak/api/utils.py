"""
JWT utilities and the authentication dependency.

Tokens carry the user id as subject and travel in the http-only ``token``
cookie; an ``Authorization: Bearer`` header is accepted as well, for clients
that cannot hold cookies.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Header, HTTPException, Response

from socketspeak.database.config.config import settings
from socketspeak.database.core import errors
from socketspeak.database.core.funcs import get_user
from socketspeak.database.entities import User

log = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed JWT.

    Parameters
    ----------
    data : dict
        Claims to embed, typically ``{"sub": <user id>}``.
    expires_delta : timedelta, optional
        Lifetime; defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[str]:
    """Return the token subject, or None if the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
    return payload.get("sub")


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        secure=settings.COOKIE_SECURE,
        samesite="none" if settings.COOKIE_SECURE else "lax",
    )


def extract_token(token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def resolve_user(raw_token: Optional[str]) -> Optional[User]:
    """User behind a token, or None when the token or its user is not valid."""
    if not raw_token:
        return None
    subject = verify_token(raw_token)
    if not subject:
        return None
    try:
        return get_user(uuid.UUID(subject))
    except (ValueError, errors.NotFound):
        return None


def get_current_user(
    token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
) -> User:
    """FastAPI dependency guarding every authenticated route."""
    raw_token = extract_token(token, authorization)
    if not raw_token:
        raise HTTPException(status_code=401, detail="Unauthorized - No Token Provided")
    user = resolve_user(raw_token)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized - Invalid Token")
    return user
