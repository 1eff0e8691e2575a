"""
Application entrypoint.

Builds the FastAPI app: logging, CORS for the frontend, the service-error
handler, the REST router under ``/api``, the WebSocket router, and the
presence registry stored on ``app.state``.

Run with ``socketspeak`` (console script) or ``uvicorn socketspeak.main:app``.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from socketspeak.api.fast_api import router as api_router
from socketspeak.api.socket_api import router as socket_router
from socketspeak.database.config.config import settings
from socketspeak.database.core.db import init_db
from socketspeak.database.core.errors import ChatServiceError
from socketspeak.realtime import PresenceRegistry

log = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.INIT_MODE.lower() != "prod":
        init_db()
    log.info("SocketSpeak backend started (mode=%s)", settings.INIT_MODE)
    yield
    log.info("SocketSpeak backend stopped")


async def handle_service_error(request: Request, exc: ChatServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="SocketSpeak", lifespan=lifespan)
    app.state.presence = PresenceRegistry(send_timeout=settings.WS_SEND_TIMEOUT)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ChatServiceError, handle_service_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix="/api")
    app.include_router(socket_router)

    @app.get("/")
    def health():
        return {"status": "ok", "message": "Server is running"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run("socketspeak.main:app", host="0.0.0.0", port=5001)
