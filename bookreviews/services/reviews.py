"""
Review Lifecycle Service

Create, update, soft-delete and read book reviews.

Business Rules:
- One active review per user per book. The pre-check gives a friendly error,
  the partial unique index uq_reviews_active_user_book is the real guard.
- Only the author can update or delete a review
- A deleted review is frozen: updating or deleting it again is a conflict.
  Writes re-check is_deleted in the UPDATE itself, so a concurrent delete
  cannot be overwritten or repeated.
- Listings never include soft-deleted reviews

Every mutating function commits exactly once; on a constraint violation the
session is rolled back and ConflictError is raised.
"""

import logging
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookreviews.models import Book, Review, User
from bookreviews.services.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from bookreviews.services.stats import get_book_rating

logger = logging.getLogger(__name__)

MIN_RATING = Decimal("1.0")
MAX_RATING = Decimal("5.0")
MAX_TITLE_LENGTH = 140
MAX_BODY_LENGTH = 5000


class BookReviews(NamedTuple):
    """Active reviews of a book with its rating aggregate."""

    book: Book
    reviews: list[Review]
    average_rating: float
    total_reviews: int


# =============================================================================
# Helper Functions
# =============================================================================


def get_user_or_raise(db: Session, user_id: int) -> User:
    """Get a user by ID or raise NotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def get_book_or_raise(db: Session, book_id: int) -> Book:
    """Get a book by ID or raise NotFoundError."""
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError(f"Book with id {book_id} not found")
    return book


def _normalize_rating(rating) -> Decimal | None:
    if rating is None:
        return None
    try:
        value = Decimal(str(rating))
    except InvalidOperation:
        raise InvalidInputError(f"Rating must be a number, got {rating!r}") from None
    if not value.is_finite() or value < MIN_RATING or value > MAX_RATING:
        raise InvalidInputError("Rating must be between 1.0 and 5.0")
    return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _validate_text(title: str | None, body: str | None) -> None:
    if title is not None and len(title) > MAX_TITLE_LENGTH:
        raise InvalidInputError(
            f"Review title must be at most {MAX_TITLE_LENGTH} characters"
        )
    if body is not None and len(body) > MAX_BODY_LENGTH:
        raise InvalidInputError(
            f"Review body must be at most {MAX_BODY_LENGTH} characters"
        )


def _reviews_query():
    return select(Review).options(selectinload(Review.user), selectinload(Review.book))


def _update_active_review(db: Session, review_id: int, values: dict) -> bool:
    """
    Write values to a review only while it is still active, then commit.

    The is_deleted test is part of the UPDATE, so a delete committed after
    the caller's checks makes this a no-op. Returns False in that case.
    """
    result = db.execute(
        update(Review)
        .where(Review.id == review_id, Review.is_deleted == False)  # noqa: E712
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return False

    db.commit()
    return True


def _active_review_exists(db: Session, user_id: int, book_id: int) -> bool:
    stmt = select(Review.id).where(
        Review.user_id == user_id,
        Review.book_id == book_id,
        Review.is_deleted == False,  # noqa: E712
    )
    return db.execute(stmt).first() is not None


# =============================================================================
# Reads
# =============================================================================


def get_review(db: Session, review_id: int) -> Review:
    """
    Get a review by ID with user and book loaded.

    Soft-deleted reviews are returned too; callers decide what a deleted
    review means for their operation.

    Raises:
        NotFoundError: If no review has this ID
    """
    review = db.execute(_reviews_query().where(Review.id == review_id)).scalar_one_or_none()

    if review is None:
        raise NotFoundError(f"Review with id {review_id} not found")
    return review


def get_book_reviews(db: Session, book_id: int) -> BookReviews:
    """
    List a book's active reviews, newest first, with its rating aggregate.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = get_book_or_raise(db, book_id)

    stmt = (
        _reviews_query()
        .where(
            Review.book_id == book_id,
            Review.is_deleted == False,  # noqa: E712
        )
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    reviews = list(db.execute(stmt).scalars().all())

    average_rating, total_reviews = get_book_rating(db, book_id)

    return BookReviews(
        book=book,
        reviews=reviews,
        average_rating=average_rating,
        total_reviews=total_reviews,
    )


def get_user_review_for_book(db: Session, user_id: int, book_id: int) -> Review:
    """
    Get the user's active review of a book.

    Raises:
        NotFoundError: If the book does not exist or the user has no
            active review for it
    """
    get_book_or_raise(db, book_id)

    stmt = _reviews_query().where(
        Review.user_id == user_id,
        Review.book_id == book_id,
        Review.is_deleted == False,  # noqa: E712
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFoundError(
            f"User {user_id} has no review for book {book_id}"
        )
    return review


def get_user_reviews(db: Session, user_id: int) -> list[Review]:
    """
    List a user's active reviews, newest first.

    Raises:
        NotFoundError: If the user does not exist
    """
    get_user_or_raise(db, user_id)

    stmt = (
        _reviews_query()
        .where(
            Review.user_id == user_id,
            Review.is_deleted == False,  # noqa: E712
        )
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


# =============================================================================
# Mutations
# =============================================================================


def create_review(
    db: Session,
    user_id: int,
    book_id: int,
    rating: Decimal | float | None = None,
    title: str | None = None,
    body: str | None = None,
) -> Review:
    """
    Create a review of a book.

    Args:
        db: Database session
        user_id: Author of the review
        book_id: Book being reviewed
        rating: Optional rating, 1.0 to 5.0
        title: Optional title, at most 140 characters
        body: Optional text, at most 5000 characters

    Returns:
        The persisted review with user and book loaded

    Raises:
        InvalidInputError: If the rating or text lengths are out of range
        NotFoundError: If the user or book does not exist
        ConflictError: If the user already has an active review of the book
    """
    normalized_rating = _normalize_rating(rating)
    _validate_text(title, body)

    get_user_or_raise(db, user_id)
    get_book_or_raise(db, book_id)

    if _active_review_exists(db, user_id, book_id):
        logger.warning(f"User {user_id} already reviewed book {book_id}")
        raise ConflictError("You have already reviewed this book")

    review = Review(
        book_id=book_id,
        user_id=user_id,
        rating=normalized_rating,
        title=title,
        body=body,
        is_deleted=False,
    )
    db.add(review)

    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create for the same user and book
        db.rollback()
        logger.warning(
            f"Concurrent review create rejected for user {user_id}, book {book_id}"
        )
        raise ConflictError("You have already reviewed this book") from None

    logger.info(f"Review {review.id} created by user {user_id} for book {book_id}")

    return get_review(db, review.id)


def update_review(
    db: Session,
    user_id: int,
    review_id: int,
    rating: Decimal | float | None = None,
    title: str | None = None,
    body: str | None = None,
) -> Review:
    """
    Partially update a review. None leaves a field unchanged.

    updated_at is refreshed even when nothing else changes.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller is not the author
        ConflictError: If the review has been deleted
        InvalidInputError: If the rating or text lengths are out of range
    """
    review = get_review(db, review_id)

    if review.user_id != user_id:
        raise ForbiddenError("You can only update your own reviews")

    if review.is_deleted:
        logger.warning(f"Update rejected for deleted review {review_id}")
        raise ConflictError("Cannot update a deleted review")

    normalized_rating = _normalize_rating(rating)
    _validate_text(title, body)

    values = {"updated_at": datetime.now(UTC)}
    if normalized_rating is not None:
        values["rating"] = normalized_rating
    if title is not None:
        values["title"] = title
    if body is not None:
        values["body"] = body

    if not _update_active_review(db, review_id, values):
        logger.warning(f"Update rejected for review {review_id} deleted concurrently")
        raise ConflictError("Cannot update a deleted review")

    logger.info(f"Review {review_id} updated by user {user_id}")

    return get_review(db, review_id)


def delete_review(db: Session, user_id: int, review_id: int) -> None:
    """
    Soft-delete a review. The row is kept with is_deleted=True.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller is not the author
        ConflictError: If the review is already deleted
    """
    review = get_review(db, review_id)

    if review.user_id != user_id:
        raise ForbiddenError("You can only delete your own reviews")

    if review.is_deleted:
        logger.warning(f"Delete rejected for already deleted review {review_id}")
        raise ConflictError("Review is already deleted")

    values = {"is_deleted": True, "updated_at": datetime.now(UTC)}
    if not _update_active_review(db, review_id, values):
        logger.warning(f"Delete rejected for review {review_id} deleted concurrently")
        raise ConflictError("Review is already deleted")

    logger.info(f"Review {review_id} deleted by user {user_id}")
