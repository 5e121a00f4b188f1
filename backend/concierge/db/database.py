"""
Database connection and session management.
SQLite (default, local development) and PostgreSQL (pooled) backends.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Generator
import logging
import os

from concierge.core.config import settings
from concierge.db.models import Base

logger = logging.getLogger(__name__)

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _resolve_sqlite_url(url: str) -> str:
    """Anchor `sqlite:///./file.db` to the backend directory."""
    db_path = url.replace("sqlite:///", "", 1)
    if db_path.startswith("./"):
        return f"sqlite:///{os.path.join(_BACKEND_DIR, db_path[2:])}"
    return url


def build_engine(database_url: str) -> Engine:
    """Create an engine configured for the given backend."""
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            _resolve_sqlite_url(database_url),
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

        @event.listens_for(sqlite_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

        return sqlite_engine

    # PostgreSQL: pooled, with a server-side statement timeout so a slow
    # catalog query surfaces as a recoverable error instead of hanging.
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=settings.database_pool_pre_ping,
        pool_timeout=30,
        echo=False,
        connect_args={
            "connect_timeout": 10,
            "options": f"-c statement_timeout={settings.database_statement_timeout_ms}",
        },
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None) -> None:
    """Create any missing tables."""
    logger.info("Initializing database schema...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema initialized")
