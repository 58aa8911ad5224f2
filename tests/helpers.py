"""
Test data helpers shared by the test modules.

Rows are inserted directly through the session so tests can arrange
states (deleted reviews, back-dated timestamps) the services never produce.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from jose import jwt
from sqlalchemy.orm import Session

from bookreviews.config import get_settings
from bookreviews.models import Book, Genre, ReadingState, ReadingStatus, Review, User
from bookreviews.services.security import ALGORITHM

ACCESS_TOKEN_EXPIRE_MINUTES = 15


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Mint an access token the way the account service does: HS256 with the
    shared secret, an exp claim and type "access".
    """
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(to_encode, get_settings().secret_key, algorithm=ALGORITHM)


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def make_user(db: Session, username: str, full_name: str | None = None) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        full_name=full_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_book(
    db: Session,
    title: str,
    genres: list[Genre] | None = None,
    page_count: int | None = None,
) -> Book:
    book = Book(title=title, page_count=page_count, genres=genres or [])
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def make_review(
    db: Session,
    user: User,
    book: Book,
    rating: str | None = "4.0",
    created_at: datetime | None = None,
    is_deleted: bool = False,
) -> Review:
    """Insert a review directly, bypassing the service checks."""
    review = Review(
        user_id=user.id,
        book_id=book.id,
        rating=Decimal(rating) if rating is not None else None,
        title="Review",
        body="Some thoughts.",
        is_deleted=is_deleted,
    )
    if created_at is not None:
        review.created_at = created_at
        review.updated_at = created_at
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def set_reading_status(
    db: Session,
    user: User,
    book: Book,
    state: ReadingState,
    finished_at: datetime | None = None,
) -> ReadingStatus:
    reading_status = ReadingStatus(
        user_id=user.id,
        book_id=book.id,
        status=state.value,
        finished_at=finished_at,
    )
    db.add(reading_status)
    db.commit()
    db.refresh(reading_status)
    return reading_status
