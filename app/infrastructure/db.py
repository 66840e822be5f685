"""Database infrastructure setup."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.errors import StoreUnavailableError
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import logger

SessionFactory = Callable[[], Session]

# Engine creation is deferred until needed so in-memory mode never touches a database
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required for database operations")
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.debug_mode,
        )
    return _engine


def get_db_session() -> Session:
    """
    Get a database session.

    Returns:
        SQLAlchemy session instance
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal()


@contextmanager
def session_scope(factory: SessionFactory, operation: str) -> Iterator[Session]:
    """
    Run one unit of work in a single transaction.

    Commits when the block exits normally. Any SQLAlchemy failure rolls the
    transaction back and surfaces as a retryable StoreUnavailableError, so
    callers never observe a half-applied write.

    Args:
        factory: Callable returning a fresh SQLAlchemy session
        operation: Short label used in logs and error details

    Yields:
        SQLAlchemy session bound to the transaction
    """
    db = factory()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error during {operation}: {str(e)}")
        raise StoreUnavailableError(operation) from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
