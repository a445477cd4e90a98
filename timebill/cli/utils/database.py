"""Database access for CLI commands."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from timebill.config import TimebillConfig
from timebill.db import create_db_engine, get_session_factory


@contextmanager
def cli_session(config: TimebillConfig) -> Iterator[Session]:
    """Open a session on the configured database and dispose of it afterwards."""
    engine = create_db_engine(config.database_url, config.database_echo)
    session = get_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
