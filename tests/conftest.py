"""
pytest Fixtures for Library API Tests

This file contains shared fixtures used across all test files.

FIXTURE LAYOUT:
- settings: test Settings (SQLite in memory, fixed secret key)
- engine / session_factory: a fresh in-memory database per test
- db_session: session for arranging data and checking results
- app / client: FastAPI app and TestClient sharing that database
- sample_*: test data

Every test gets its own in-memory database, so tests never see each
other's rows.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app.
# library_api.main builds a module-level app from get_settings().
import os

TEST_SECRET_KEY = "test-secret-key-for-unit-tests-at-least-32-characters-long"

os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from library_api.config import Settings
from library_api.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
    drop_tables,
)
from library_api.main import create_app
from library_api.models import Author, Book, User
from library_api.services.security import create_user_token, hash_password

SAMPLE_PASSWORD = "SecurePass123"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings for tests; ignores any local .env file."""
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET_KEY,
        database_url="sqlite://",
        log_level="DEBUG",
    )


@pytest.fixture
def engine(settings: Settings) -> Generator[Engine, None, None]:
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool (chosen by create_db_engine for SQLite) keeps a single
    connection alive, so the in-memory database survives between sessions.
    """
    engine = create_db_engine(settings)
    create_tables(engine)

    yield engine

    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Session used by tests to arrange data and inspect results."""
    session = session_factory()

    yield session

    session.close()


@pytest.fixture
def app(settings: Settings, session_factory: sessionmaker[Session]) -> FastAPI:
    """Application wired to the test database."""
    return create_app(settings, session_factory=session_factory)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Create a test client for the app.

    Using the client as a context manager runs the lifespan handlers.
    """
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a user who can log in with SAMPLE_PASSWORD."""
    user = User(
        username="testuser",
        favorite_genre="refactoring",
        hashed_password=hash_password(SAMPLE_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(sample_user: User, settings: Settings) -> str:
    """A valid bearer token for sample_user."""
    return create_user_token(sample_user.id, sample_user.username, settings)


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = Author(name="Robert Martin", born=1952)
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_books(db_session: Session, sample_author: Author) -> list[Book]:
    """
    Create three books by two authors.

    - Clean Code (Robert Martin): refactoring
    - Agile software development (Robert Martin): agile, patterns, design
    - Crime and punishment (Fyodor Dostoevsky): classic, crime
    """
    dostoevsky = Author(name="Fyodor Dostoevsky", born=1821)
    books = [
        Book(title="Clean Code", published=2008, author=sample_author, genres=["refactoring"]),
        Book(
            title="Agile software development",
            published=2002,
            author=sample_author,
            genres=["agile", "patterns", "design"],
        ),
        Book(title="Crime and punishment", published=1866, author=dostoevsky, genres=["classic", "crime"]),
    ]
    db_session.add_all(books)
    db_session.commit()
    for book in books:
        db_session.refresh(book)
    return books
