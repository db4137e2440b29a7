"""Database configuration and session management."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from wattboard.core.config import settings
from wattboard.core.exceptions import StorageError

logger = logging.getLogger(__name__)

_connect_args = (
    {"check_same_thread": False}  # Needed for SQLite
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_scope(db: Session, action: str) -> Iterator[Session]:
    """Run a unit of work, rolling the session back if anything inside fails.

    SQLAlchemy errors are logged and re-raised as StorageError; every other
    exception is re-raised unchanged after the rollback.
    """
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure while trying to %s", action)
        raise StorageError(f"Storage failure while trying to {action}") from exc
    except Exception:
        db.rollback()
        raise
