"""
Database engine, session factory and the FastAPI session dependency.
"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from salonhub.core.config import settings
from salonhub.core.exceptions import InconsistentStateError, StoreError

logger = logging.getLogger(__name__)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(dbapi_connection, connection_record):
    """Replace SQLite's ASCII-only lower() so case-insensitive LIKE folds every script"""
    dbapi_connection.create_function("lower", 1, _unicode_lower)


is_sqlite = settings.DATABASE_URL.startswith("sqlite")

connect_args = {}
if is_sqlite:
    # SQLite connections are shared across FastAPI's worker threads
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
if is_sqlite:
    event.listen(engine, "connect", register_sqlite_functions)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session per request and always close it afterwards"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create any missing tables for the registered models"""
    from salonhub.models import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


def commit_or_raise(db, action: str):
    """
    Commit the session, translating store failures into application errors.

    A failed commit is rolled back and reported as ``StoreError`` (nothing was
    written). If the rollback fails too, the outcome is unknown and
    ``InconsistentStateError`` is raised instead.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Commit failed while trying to {action}: {e}")
        try:
            db.rollback()
        except SQLAlchemyError as rollback_error:
            logger.critical(f"Rollback failed after '{action}': {rollback_error}")
            raise InconsistentStateError(
                f"Could not confirm whether '{action}' was applied; the data needs reconciliation"
            ) from rollback_error
        raise StoreError(f"Failed to {action}") from e
