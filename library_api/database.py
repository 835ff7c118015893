"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Library API.

Nothing here is created at import time. The application factory builds
the engine and session factory from its Settings and stores them on
app.state; request handlers reach them through get_db().

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request (or WebSocket connection) arrives → create a new session
2. Use session for all database operations in that request
3. Repositories commit on success, roll back on failure
4. Close session when the request ends
"""

import logging
from collections.abc import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import HTTPConnection

from library_api.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Engine and Session Factory
# =============================================================================
def create_db_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine described by the settings.

    SQLite (used for local runs and tests) gets a single shared connection
    so an in-memory database survives across sessions and threads.
    Server databases get a sized connection pool.

    Args:
        settings: Application settings

    Returns:
        Configured Engine (connections are opened lazily)
    """
    if settings.is_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.debug,
        )

    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=settings.debug,  # Log SQL in debug mode
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create a session factory bound to an engine.

    expire_on_commit=False keeps loaded attributes readable after commit,
    so a freshly saved book can still be published to subscribers.
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(connection: HTTPConnection) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Typed on HTTPConnection so the same dependency serves plain HTTP
    requests and the GraphQL WebSocket endpoint.

    Yields:
        SQLAlchemy Session instance, closed when the request ends
    """
    session_factory = connection.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    Useful for development and tests. In production, use Alembic.
    """
    # Importing the models registers them on Base.metadata
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    import library_api.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
