"""
Engine and session handling.

`get_session()` opens one transaction per service operation: it commits when
the block exits cleanly and rolls back otherwise, so a failed operation never
leaves partial state behind. Store failures are logged here with full detail
and re-raised as a generic `InternalError`.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from socketspeak.database.config.config import settings
from socketspeak.database.core.errors import InternalError
from socketspeak.database.entities import Base

log = logging.getLogger(__name__)


def _engine_options(drivername: str) -> dict:
    if drivername.startswith("sqlite"):
        # connections are shared between the event loop and the threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.database_url, **_engine_options(settings.DB_DRIVER_NAME))
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        log.exception("Database operation failed")
        raise InternalError() from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create every table that does not exist yet."""
    Base.metadata.create_all(engine)
    log.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))


def drop_db() -> None:
    Base.metadata.drop_all(engine)
