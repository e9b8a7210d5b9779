import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.db.schema import metadata

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(url: str) -> Engine:
    """Create the engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.debug)
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, echo=settings.debug)


engine = build_engine(settings.sqlalchemy_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Everything executed inside one block is committed together or rolled back.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM companies"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_database() -> None:
    """Create any missing tables (idempotent)."""
    metadata.create_all(bind=engine)


def test_postgres_connection() -> bool:
    """
    Test if the relational database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception:
        logger.exception("Database connection failed")
        return False


def execute_raw_sql(sql: str, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    """
    with get_db_session() as db:
        result = db.execute(text(sql), params or {})
        # Convert rows to dicts
        columns = result.keys()
        return [dict(zip(columns, row)) for row in result.fetchall()]
