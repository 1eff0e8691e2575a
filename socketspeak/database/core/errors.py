"""
Service-level errors raised by the core functions.

Each error carries the HTTP status the API layer answers with and any extra
keys to merge into the JSON body (e.g. ``requiresKey`` or ``isValid``), so the
client can branch its UI flow on a machine-readable flag.
"""


class ChatServiceError(Exception):
    """Base class for every error surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict:
        return {"message": self.message, **self.extra}


class NotFound(ChatServiceError):
    """Receiver, message or user absent."""

    status_code = 404


class Unauthorized(ChatServiceError):
    """Key mismatch or an action reserved to another user."""

    status_code = 403


class AuthenticationError(ChatServiceError):
    """Wrong login credentials."""

    status_code = 401


class ValidationError(ChatServiceError):
    """Rejected input; no store mutation was attempted."""

    status_code = 400


class UpstreamFailure(ChatServiceError):
    """The image host failed for every attempted upload."""

    status_code = 502


class InternalError(ChatServiceError):
    """Store unavailable. The message stays generic, details go to the log."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", **extra):
        super().__init__(message, **extra)
