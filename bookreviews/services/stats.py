"""
Statistics Service

Read-only aggregation over reviews, interactions and reading statuses.

Numbers are computed live with COUNT/SUM/AVG queries. The queries behind
one statistics response run independently, so the panels may reflect
slightly different instants under concurrent writes.

Soft-deleted reviews and comments never contribute to any figure.
"""

import logging
import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import Session

from bookreviews.config import get_settings
from bookreviews.models import (
    Book,
    Genre,
    LibraryList,
    ReadingState,
    ReadingStatus,
    Review,
    ReviewComment,
    ReviewLike,
    User,
    book_genres,
)
from bookreviews.schemas.review import BookRatingStats
from bookreviews.schemas.stats import (
    GenreStats,
    RatingStats,
    ReadingCounts,
    ReadingTrends,
)
from bookreviews.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# (stars, lower bound inclusive, upper bound exclusive)
RATING_BANDS = (
    (5, Decimal("4.5"), Decimal("5.1")),
    (4, Decimal("3.5"), Decimal("4.5")),
    (3, Decimal("2.5"), Decimal("3.5")),
    (2, Decimal("1.5"), Decimal("2.5")),
    (1, Decimal("0.0"), Decimal("1.5")),
)


class RatingSummary(NamedTuple):
    average_rating: float
    total_reviews: int
    total_ratings: int
    distribution: dict[int, int]


class ReadingStats(NamedTuple):
    """The four panels of a user's reading statistics."""

    counts: ReadingCounts
    rating_stats: RatingStats
    top_genres: list[GenreStats]
    trends: ReadingTrends


# =============================================================================
# Helper Functions
# =============================================================================


def _active_reviews():
    return Review.is_deleted == False  # noqa: E712


def _summarize_ratings(db: Session, *criteria) -> RatingSummary:
    """
    Average, counts and star-band histogram for active reviews matching criteria.

    Unrated reviews count toward total_reviews only.
    """
    band_columns = [
        func.sum(
            case(
                (and_(Review.rating >= low, Review.rating < high), 1),
                else_=0,
            )
        )
        for _, low, high in RATING_BANDS
    ]
    stmt = select(
        func.avg(Review.rating),
        func.count(Review.id),
        func.count(Review.rating),
        *band_columns,
    ).where(_active_reviews(), *criteria)

    row = db.execute(stmt).one()
    avg_rating = round(float(row[0]), 2) if row[0] is not None else 0.0

    distribution = {stars: 0 for stars in range(1, 6)}
    for (stars, _, _), count in zip(RATING_BANDS, row[3:]):
        distribution[stars] = int(count or 0)

    return RatingSummary(
        average_rating=avg_rating,
        total_reviews=row[1] or 0,
        total_ratings=row[2] or 0,
        distribution=distribution,
    )


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def _year_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, start.replace(year=start.year + 1)


def _round_half_up(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return math.floor(value * 10 + 0.5) / 10


# =============================================================================
# Book and Review Aggregates
# =============================================================================


def get_book_rating(db: Session, book_id: int) -> tuple[float, int]:
    """
    Average rating and active review count for a book.

    The average is rounded to 2 decimals and is 0.0 when no active review
    carries a rating.
    """
    summary = _summarize_ratings(db, Review.book_id == book_id)
    return summary.average_rating, summary.total_reviews


def get_book_rating_stats(db: Session, book_id: int) -> BookRatingStats:
    """
    Rating statistics for a book.

    Returns:
        - Average rating
        - Total active review count
        - Rating distribution per star band

    Raises:
        NotFoundError: If the book does not exist
    """
    if db.get(Book, book_id) is None:
        raise NotFoundError(f"Book with id {book_id} not found")

    summary = _summarize_ratings(db, Review.book_id == book_id)

    return BookRatingStats(
        book_id=book_id,
        average_rating=summary.average_rating,
        total_reviews=summary.total_reviews,
        rating_distribution=summary.distribution,
    )


def count_review_likes(db: Session, review_id: int) -> int:
    """Number of likes on a review."""
    stmt = select(func.count()).select_from(ReviewLike).where(
        ReviewLike.review_id == review_id
    )
    return db.execute(stmt).scalar() or 0


def count_review_comments(db: Session, review_id: int) -> int:
    """Number of active comments on a review."""
    stmt = select(func.count()).select_from(ReviewComment).where(
        ReviewComment.review_id == review_id,
        ReviewComment.is_deleted == False,  # noqa: E712
    )
    return db.execute(stmt).scalar() or 0


# =============================================================================
# Reading Statistics
# =============================================================================


def get_reading_counts(db: Session, user_id: int) -> ReadingCounts:
    """Shelf counts, pages read, active reviews and lists for a user."""
    status_stmt = (
        select(ReadingStatus.status, func.count(ReadingStatus.id))
        .where(ReadingStatus.user_id == user_id)
        .group_by(ReadingStatus.status)
    )
    by_status = {status: count for status, count in db.execute(status_stmt).all()}

    pages_stmt = (
        select(func.coalesce(func.sum(Book.page_count), 0))
        .select_from(ReadingStatus)
        .join(Book, Book.id == ReadingStatus.book_id)
        .where(
            ReadingStatus.user_id == user_id,
            ReadingStatus.status == ReadingState.READ.value,
        )
    )
    total_pages = db.execute(pages_stmt).scalar() or 0

    reviews_stmt = select(func.count(Review.id)).where(
        Review.user_id == user_id,
        _active_reviews(),
    )
    total_reviews = db.execute(reviews_stmt).scalar() or 0

    lists_stmt = select(func.count(LibraryList.id)).where(LibraryList.user_id == user_id)
    total_lists = db.execute(lists_stmt).scalar() or 0

    return ReadingCounts(
        total_books_read=by_status.get(ReadingState.READ.value, 0),
        total_books_reading=by_status.get(ReadingState.READING.value, 0),
        total_books_to_read=by_status.get(ReadingState.WANT_TO_READ.value, 0),
        total_pages_read=int(total_pages),
        total_reviews=total_reviews,
        total_lists=total_lists,
    )


def get_rating_stats(db: Session, user_id: int) -> RatingStats:
    """Average and star-band histogram over a user's active rated reviews."""
    summary = _summarize_ratings(db, Review.user_id == user_id)

    return RatingStats(
        average_rating=summary.average_rating,
        total_ratings=summary.total_ratings,
        five_star_books=summary.distribution[5],
        four_star_books=summary.distribution[4],
        three_star_books=summary.distribution[3],
        two_star_books=summary.distribution[2],
        one_star_books=summary.distribution[1],
    )


def get_top_genres(db: Session, user_id: int, limit: int | None = None) -> list[GenreStats]:
    """
    Most frequent genres among a user's finished books.

    A book with several genres counts once toward each. Percentages are
    relative to the number of finished books, so they can sum past 100.
    Ties on count are broken by genre name.
    """
    if limit is None:
        limit = get_settings().top_genres_limit

    total_stmt = select(func.count(ReadingStatus.id)).where(
        ReadingStatus.user_id == user_id,
        ReadingStatus.status == ReadingState.READ.value,
    )
    total_read = db.execute(total_stmt).scalar() or 0

    if total_read == 0:
        return []

    book_count = func.count(ReadingStatus.book_id)
    genre_stmt = (
        select(Genre.name, book_count)
        .select_from(ReadingStatus)
        .join(book_genres, book_genres.c.book_id == ReadingStatus.book_id)
        .join(Genre, Genre.id == book_genres.c.genre_id)
        .where(
            ReadingStatus.user_id == user_id,
            ReadingStatus.status == ReadingState.READ.value,
        )
        .group_by(Genre.id, Genre.name)
        .order_by(book_count.desc(), Genre.name.asc())
        .limit(limit)
    )

    return [
        GenreStats(
            genre_name=name,
            book_count=count,
            percentage=_round_half_up(count * 100 / total_read),
        )
        for name, count in db.execute(genre_stmt).all()
    ]


def get_reading_trends(db: Session, user_id: int, now: datetime | None = None) -> ReadingTrends:
    """
    Finished books and active reviews in the current calendar month and year.

    Periods are half-open: [first instant of period, first instant of next).
    """
    if now is None:
        now = datetime.now(UTC)

    month_start, next_month = _month_bounds(now)
    year_start, next_year = _year_bounds(now)

    def books_finished(start: datetime, end: datetime) -> int:
        stmt = select(func.count(ReadingStatus.id)).where(
            ReadingStatus.user_id == user_id,
            ReadingStatus.status == ReadingState.READ.value,
            ReadingStatus.finished_at >= start,
            ReadingStatus.finished_at < end,
        )
        return db.execute(stmt).scalar() or 0

    def reviews_written(start: datetime, end: datetime) -> int:
        stmt = select(func.count(Review.id)).where(
            Review.user_id == user_id,
            _active_reviews(),
            Review.created_at >= start,
            Review.created_at < end,
        )
        return db.execute(stmt).scalar() or 0

    return ReadingTrends(
        books_read_this_month=books_finished(month_start, next_month),
        books_read_this_year=books_finished(year_start, next_year),
        reviews_this_month=reviews_written(month_start, next_month),
        reviews_this_year=reviews_written(year_start, next_year),
    )


def get_reading_stats(db: Session, user_id: int, now: datetime | None = None) -> ReadingStats:
    """
    Complete reading statistics for a user.

    A user with no activity gets zeroed panels and an empty genre list.

    Args:
        db: Database session
        user_id: User to describe
        now: Reference instant for trends (defaults to the current UTC time)

    Raises:
        NotFoundError: If the user does not exist
    """
    if db.get(User, user_id) is None:
        raise NotFoundError(f"User with id {user_id} not found")

    stats = ReadingStats(
        counts=get_reading_counts(db, user_id),
        rating_stats=get_rating_stats(db, user_id),
        top_genres=get_top_genres(db, user_id),
        trends=get_reading_trends(db, user_id, now),
    )

    logger.debug(
        f"Reading stats for user {user_id}: {stats.counts.total_books_read} read, "
        f"{stats.rating_stats.total_ratings} ratings"
    )

    return stats
