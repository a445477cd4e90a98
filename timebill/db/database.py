"""Engine, session and transaction helpers."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from timebill.config import get_config

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(
    url: Optional[str] = None, echo: Optional[bool] = None, **kwargs: Any
) -> Engine:
    """Create the SQLAlchemy engine.

    SQLite connections are shared across FastAPI's worker threads and get
    foreign key enforcement switched on for every new connection.

    Args:
        url: Database URL (default: DATABASE_URL from the configuration)
        echo: Log every SQL statement (default: DATABASE_ECHO)
        **kwargs: Passed through to ``sqlalchemy.create_engine``
    """
    if url is None or echo is None:
        config = get_config()
        url = url or config.database_url
        echo = config.database_echo if echo is None else echo

    connect_args = kwargs.pop("connect_args", {})
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args.setdefault("check_same_thread", False)

    engine = create_engine(url, echo=echo, connect_args=connect_args, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug(f"Created database engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


def init_database(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Registers the mapped classes on Base.metadata
    from timebill.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit on success; roll back and re-raise on any error.

    Example:
        >>> with transaction(db):
        ...     db.add(invoice)
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
