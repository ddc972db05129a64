"""Database session management."""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from face_identity.core.logging import get_logger
from face_identity.infrastructure.database.models import Base

logger = get_logger(__name__)


def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """Create the engine, make sure tables exist and return a session factory.

    Args:
        database_url: SQLAlchemy database URL
        echo: Whether to log emitted SQL

    Returns:
        sessionmaker bound to the new engine
    """
    engine: Engine = create_engine(database_url, echo=echo)
    Base.metadata.create_all(engine)
    logger.debug("Database ready", url=engine.url.render_as_string(hide_password=True))
    return sessionmaker(engine, expire_on_commit=False, autoflush=False)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Commits when the block succeeds, rolls back and re-raises otherwise.

    Example:
        ```python
        with session_scope(factory) as session:
            session.add(record)
        ```
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error(
            "Database session error",
            error=str(e),
            exc_info=True
        )
        session.rollback()
        raise
    finally:
        session.close()
