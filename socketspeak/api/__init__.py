"""
The `api` package defines the backend’s HTTP and WebSocket interface,
along with supporting utilities and data models.

It integrates FastAPI routing, JWT authentication, and the realtime
channel. The package ensures clean request/response validation, secure
access control, and targeted delivery of conversation events.

Contents
--------
- fast_api
    Defines the FastAPI router with endpoints for:
        * User signup, login, logout, session check and profile update
        * Conversation partners, message history, sending and deleting
        * User search by email
        * Private key set, rotation and verification

- socket_api
    WebSocket endpoint `/ws`:
        * Authenticates the connection and registers it for presence
        * Relays download-coordination events between clients

- models
    Pydantic schemas (camelCase on the wire) for request/response validation:
        * Credentials, signup and profile payloads
        * Messages, key verification results, realtime frames

- utils
    JWT utilities:
        * `create_access_token` — issues signed JWTs with expiration
        * `verify_token` — validates JWTs and extracts user identity
        * `get_current_user` — FastAPI dependency for authenticated routes
"""
