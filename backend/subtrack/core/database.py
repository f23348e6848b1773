"""Engine and session factory for the subscription store.

The default DSN is a local SQLite file; any SQLAlchemy URL can be set through
APP_DATABASE_DSN.
"""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from subtrack.core.config import settings

logger = logging.getLogger(__name__)


def _connect_args(dsn: str) -> dict[str, Any]:
    # SQLite connections are shared across FastAPI's worker threads
    if make_url(dsn).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.APP_DATABASE_DSN, connect_args=_connect_args(settings.APP_DATABASE_DSN))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the subscription tables if they do not exist yet."""
    logger.info("Creating tables on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
