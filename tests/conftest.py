"""
pytest Fixtures for Book Reviews API Tests

Shared fixtures used across all test files.

FIXTURE SCOPES:
- engine: function scope, a fresh in-memory database per test. Services
  commit and roll back for real, so an outer rollback cannot isolate tests.
- db_session: function scope, one session on that engine
- sample data: users, genres, books and reviews built on db_session
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookreviews.database import Base, get_db
from bookreviews.main import app
from bookreviews.models import Book, Genre, Review, User
from tests.helpers import make_user

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps tests fast and isolated. The partial unique index
# and the composite primary key are enforced by SQLite as well.


@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps the single connection alive for the whole test.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session for one test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser", full_name="Test User")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser")


@pytest.fixture
def fiction_genre(db_session: Session) -> Genre:
    genre = Genre(name="Fiction", description="Imaginative narrative.")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def mystery_genre(db_session: Session) -> Genre:
    genre = Genre(name="Mystery", description="Crime and detection.")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def sample_book(db_session: Session, fiction_genre: Genre) -> Book:
    """Create a sample book in the Fiction genre."""
    book = Book(
        title="1984",
        isbn="9780451524935",
        description="A dystopian novel set in a totalitarian society.",
        cover_url="https://covers.example.com/1984.jpg",
        page_count=328,
        genres=[fiction_genre],
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """Create a sample review for testing."""
    review = Review(
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=Decimal("4.0"),
        title="Great book!",
        body="I really enjoyed reading this book.",
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    return review
