"""
Database configuration and session management.

This module sets up the SQLAlchemy engine and session factory. PostgreSQL
is used in production; SQLite works for local development and tests.
"""

import sqlite3
from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

settings = get_settings()
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("sqlite"):
    # SQLite connections are shared with the threadpool FastAPI runs sync code on
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=settings.sql_debug,
    )
else:
    # - pool_pre_ping: Verify connections are alive before using them
    # - pool_size: Number of connections to keep in pool
    # - max_overflow: Number of connections to allow beyond pool_size
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=settings.sql_debug,
    )

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for declarative models
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db() -> Generator[Session, None, None]:
    """
    Request-scoped session dependency.

    Routers and the current-user dependency share the session of one
    request; it is closed when the response has been sent.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the users, documents and document_analyses tables if missing."""
    # Registers the mapped classes on Base.metadata
    from . import models_db  # noqa: F401

    Base.metadata.create_all(bind=engine)
