"""
Tests for the Statistics Service

- Book rating aggregates ignore soft-deleted reviews
- Star bands are lower-inclusive (1.5 is two stars, 4.5 is five stars)
- Genre percentages are relative to finished books, one decimal place
- Trends use the calendar month and year of a reference instant
- A user without activity gets a fully zeroed response
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from bookreviews.models import Book, Genre, LibraryList, ReadingState, Review, User
from bookreviews.services import reviews as review_service
from bookreviews.services.exceptions import NotFoundError
from bookreviews.services.stats import (
    RATING_BANDS,
    get_book_rating,
    get_book_rating_stats,
    get_reading_counts,
    get_reading_stats,
    get_rating_stats,
    get_reading_trends,
    get_top_genres,
)
from tests.helpers import make_book, make_review, make_user, set_reading_status


# =============================================================================
# Book Ratings
# =============================================================================


class TestBookRating:
    """Tests for get_book_rating and get_book_rating_stats"""

    def test_average_after_soft_delete(self, db_session: Session, sample_book: Book):
        """[5.0, 4.0, 3.0] averages 4.0; deleting the 3.0 makes it 4.5 over 2."""
        reviews = [
            make_review(db_session, make_user(db_session, f"reader{i}"), sample_book, rating)
            for i, rating in enumerate(["5.0", "4.0", "3.0"])
        ]

        assert get_book_rating(db_session, sample_book.id) == (4.0, 3)

        lowest = reviews[2]
        review_service.delete_review(db_session, lowest.user_id, lowest.id)

        assert get_book_rating(db_session, sample_book.id) == (4.5, 2)

    def test_no_reviews(self, db_session: Session, sample_book: Book):
        assert get_book_rating(db_session, sample_book.id) == (0.0, 0)

    def test_unrated_reviews_count_but_do_not_average(
        self, db_session: Session, sample_book: Book
    ):
        make_review(db_session, make_user(db_session, "quiet"), sample_book, None)
        make_review(db_session, make_user(db_session, "loud"), sample_book, "2.0")

        assert get_book_rating(db_session, sample_book.id) == (2.0, 2)

    def test_average_rounded_to_two_decimals(self, db_session: Session, sample_book: Book):
        for i, rating in enumerate(["5.0", "4.0", "4.0"]):
            make_review(db_session, make_user(db_session, f"reader{i}"), sample_book, rating)

        average, _ = get_book_rating(db_session, sample_book.id)

        assert average == 4.33

    def test_rating_stats_distribution(self, db_session: Session, sample_book: Book):
        for i, rating in enumerate(["5.0", "4.5", "4.0", "3.0", "1.0"]):
            make_review(db_session, make_user(db_session, f"reader{i}"), sample_book, rating)
        make_review(db_session, make_user(db_session, "gone"), sample_book, "2.0", is_deleted=True)

        stats = get_book_rating_stats(db_session, sample_book.id)

        assert stats.book_id == sample_book.id
        assert stats.total_reviews == 5
        assert stats.average_rating == 3.5
        assert stats.rating_distribution == {1: 1, 2: 0, 3: 1, 4: 1, 5: 2}

    def test_rating_stats_book_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError):
            get_book_rating_stats(db_session, 99999)


# =============================================================================
# Rating Histogram
# =============================================================================


class TestRatingStats:
    """Tests for the per-user rating histogram"""

    def _review_books(self, db: Session, user: User, ratings: list[str | None]) -> None:
        for i, rating in enumerate(ratings):
            make_review(db, user, make_book(db, f"Book {i}"), rating)

    def test_band_boundaries(self, db_session: Session, sample_user: User):
        """Each boundary value lands in the higher band exactly once."""
        self._review_books(db_session, sample_user, ["1.5", "2.5", "3.5", "4.5"])

        stats = get_rating_stats(db_session, sample_user.id)

        assert stats.one_star_books == 0
        assert stats.two_star_books == 1
        assert stats.three_star_books == 1
        assert stats.four_star_books == 1
        assert stats.five_star_books == 1
        assert stats.total_ratings == 4
        assert stats.average_rating == 3.0

    def test_band_extremes(self, db_session: Session, sample_user: User):
        self._review_books(db_session, sample_user, ["1.0", "1.4", "5.0"])

        stats = get_rating_stats(db_session, sample_user.id)

        assert stats.one_star_books == 2
        assert stats.five_star_books == 1

    def test_bands_cover_every_rating_once(self, db_session: Session, sample_user: User):
        ratings = [f"{tenths / 10:.1f}" for tenths in range(10, 51)]
        self._review_books(db_session, sample_user, ratings)

        stats = get_rating_stats(db_session, sample_user.id)

        banded = (
            stats.one_star_books
            + stats.two_star_books
            + stats.three_star_books
            + stats.four_star_books
            + stats.five_star_books
        )
        assert banded == stats.total_ratings == len(ratings)

    def test_unrated_and_deleted_reviews_excluded(
        self, db_session: Session, sample_user: User
    ):
        self._review_books(db_session, sample_user, [None, "4.0"])
        make_review(db_session, sample_user, make_book(db_session, "Gone"), "1.0", is_deleted=True)

        stats = get_rating_stats(db_session, sample_user.id)

        assert stats.total_ratings == 1
        assert stats.four_star_books == 1
        assert stats.one_star_books == 0
        assert stats.average_rating == 4.0

    def test_bands_are_contiguous(self):
        bounds = sorted((low, high) for _, low, high in RATING_BANDS)

        assert bounds[0][0] == Decimal("0.0")
        for (_, high), (next_low, _) in zip(bounds, bounds[1:]):
            assert high == next_low
        assert bounds[-1][1] > Decimal("5.0")


# =============================================================================
# Top Genres
# =============================================================================


class TestTopGenres:
    """Tests for get_top_genres"""

    def test_genre_percentages(
        self,
        db_session: Session,
        sample_user: User,
        fiction_genre: Genre,
        mystery_genre: Genre,
    ):
        """{Fiction}, {Fiction, Mystery}, {Mystery} give 2 each at 66.7%."""
        books = [
            make_book(db_session, "A", [fiction_genre]),
            make_book(db_session, "B", [fiction_genre, mystery_genre]),
            make_book(db_session, "C", [mystery_genre]),
        ]
        for book in books:
            set_reading_status(db_session, sample_user, book, ReadingState.READ)

        genres = get_top_genres(db_session, sample_user.id)

        assert [(g.genre_name, g.book_count, g.percentage) for g in genres] == [
            ("Fiction", 2, 66.7),
            ("Mystery", 2, 66.7),
        ]

    def test_only_read_books_count(
        self,
        db_session: Session,
        sample_user: User,
        fiction_genre: Genre,
        mystery_genre: Genre,
    ):
        read = make_book(db_session, "Read", [fiction_genre])
        reading = make_book(db_session, "Reading", [mystery_genre])
        set_reading_status(db_session, sample_user, read, ReadingState.READ)
        set_reading_status(db_session, sample_user, reading, ReadingState.READING)

        genres = get_top_genres(db_session, sample_user.id)

        assert [(g.genre_name, g.percentage) for g in genres] == [("Fiction", 100.0)]

    def test_sorted_by_count_then_name(
        self,
        db_session: Session,
        sample_user: User,
        fiction_genre: Genre,
        mystery_genre: Genre,
    ):
        poetry = Genre(name="Poetry")
        db_session.add(poetry)
        db_session.commit()
        books = [
            make_book(db_session, "A", [poetry]),
            make_book(db_session, "B", [mystery_genre]),
            make_book(db_session, "C", [mystery_genre]),
            make_book(db_session, "D", [fiction_genre]),
        ]
        for book in books:
            set_reading_status(db_session, sample_user, book, ReadingState.READ)

        genres = get_top_genres(db_session, sample_user.id)

        assert [g.genre_name for g in genres] == ["Mystery", "Fiction", "Poetry"]
        assert [g.percentage for g in genres] == [50.0, 25.0, 25.0]

    def test_limit(
        self,
        db_session: Session,
        sample_user: User,
        fiction_genre: Genre,
        mystery_genre: Genre,
    ):
        book = make_book(db_session, "A", [fiction_genre, mystery_genre])
        set_reading_status(db_session, sample_user, book, ReadingState.READ)

        genres = get_top_genres(db_session, sample_user.id, limit=1)

        assert [g.genre_name for g in genres] == ["Fiction"]

    def test_default_limit_is_ten(self, db_session: Session, sample_user: User):
        genres = [Genre(name=f"Genre {i:02d}") for i in range(12)]
        db_session.add_all(genres)
        db_session.commit()
        book = make_book(db_session, "Everything", genres)
        set_reading_status(db_session, sample_user, book, ReadingState.READ)

        assert len(get_top_genres(db_session, sample_user.id)) == 10

    def test_percentage_rounds_half_up(
        self, db_session: Session, sample_user: User, fiction_genre: Genre
    ):
        """1 of 16 books is 6.25%, which rounds half up to 6.3."""
        set_reading_status(
            db_session, sample_user, make_book(db_session, "F", [fiction_genre]), ReadingState.READ
        )
        for i in range(15):
            set_reading_status(
                db_session, sample_user, make_book(db_session, f"Plain {i}"), ReadingState.READ
            )

        genres = get_top_genres(db_session, sample_user.id)

        assert genres[0].percentage == 6.3

    def test_no_read_books(self, db_session: Session, sample_user: User):
        assert get_top_genres(db_session, sample_user.id) == []


# =============================================================================
# Counts and Trends
# =============================================================================


class TestReadingCounts:
    """Tests for get_reading_counts"""

    def test_counts(self, db_session: Session, sample_user: User, second_user: User):
        read_a = make_book(db_session, "A", page_count=300)
        read_b = make_book(db_session, "B", page_count=None)
        reading = make_book(db_session, "C", page_count=500)
        wanted = make_book(db_session, "D", page_count=100)
        set_reading_status(db_session, sample_user, read_a, ReadingState.READ)
        set_reading_status(db_session, sample_user, read_b, ReadingState.READ)
        set_reading_status(db_session, sample_user, reading, ReadingState.READING)
        set_reading_status(db_session, sample_user, wanted, ReadingState.WANT_TO_READ)
        set_reading_status(db_session, second_user, reading, ReadingState.READ)
        make_review(db_session, sample_user, read_a)
        make_review(db_session, sample_user, read_b, is_deleted=True)
        db_session.add_all([
            LibraryList(user_id=sample_user.id, name="Favourites"),
            LibraryList(user_id=sample_user.id, name="Summer"),
        ])
        db_session.commit()

        counts = get_reading_counts(db_session, sample_user.id)

        assert counts.total_books_read == 2
        assert counts.total_books_reading == 1
        assert counts.total_books_to_read == 1
        assert counts.total_pages_read == 300
        assert counts.total_reviews == 1
        assert counts.total_lists == 2


class TestReadingTrends:
    """Tests for get_reading_trends"""

    NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)

    def test_month_and_year_windows(self, db_session: Session, sample_user: User):
        finished = [
            datetime(2024, 3, 1, 0, 0, tzinfo=UTC),  # first instant of the month
            datetime(2024, 3, 31, 23, 59, tzinfo=UTC),
            datetime(2024, 2, 29, 23, 59, tzinfo=UTC),  # this year only
            datetime(2023, 12, 31, 23, 59, tzinfo=UTC),  # neither
            datetime(2025, 1, 1, 0, 0, tzinfo=UTC),  # next year starts here
        ]
        for i, finished_at in enumerate(finished):
            set_reading_status(
                db_session,
                sample_user,
                make_book(db_session, f"Book {i}"),
                ReadingState.READ,
                finished_at=finished_at,
            )

        trends = get_reading_trends(db_session, sample_user.id, now=self.NOW)

        assert trends.books_read_this_month == 2
        assert trends.books_read_this_year == 3

    def test_reviews_in_period(self, db_session: Session, sample_user: User):
        created = [
            datetime(2024, 3, 10, tzinfo=UTC),
            datetime(2024, 1, 2, tzinfo=UTC),
            datetime(2023, 3, 10, tzinfo=UTC),
        ]
        for i, created_at in enumerate(created):
            make_review(
                db_session, sample_user, make_book(db_session, f"Book {i}"),
                created_at=created_at,
            )
        make_review(
            db_session, sample_user, make_book(db_session, "Gone"),
            created_at=datetime(2024, 3, 11, tzinfo=UTC), is_deleted=True,
        )

        trends = get_reading_trends(db_session, sample_user.id, now=self.NOW)

        assert trends.reviews_this_month == 1
        assert trends.reviews_this_year == 2

    def test_december_rolls_into_next_year(self, db_session: Session, sample_user: User):
        set_reading_status(
            db_session,
            sample_user,
            make_book(db_session, "Winter"),
            ReadingState.READ,
            finished_at=datetime(2024, 12, 31, 22, 0, tzinfo=UTC),
        )

        trends = get_reading_trends(
            db_session, sample_user.id, now=datetime(2024, 12, 20, tzinfo=UTC)
        )

        assert trends.books_read_this_month == 1
        assert trends.books_read_this_year == 1

    def test_statuses_other_than_read_ignored(self, db_session: Session, sample_user: User):
        set_reading_status(
            db_session,
            sample_user,
            make_book(db_session, "Paused"),
            ReadingState.READING,
            finished_at=datetime(2024, 3, 5, tzinfo=UTC),
        )

        trends = get_reading_trends(db_session, sample_user.id, now=self.NOW)

        assert trends.books_read_this_month == 0


# =============================================================================
# Full Statistics
# =============================================================================


class TestReadingStats:
    """Tests for get_reading_stats"""

    def test_new_user_is_fully_zeroed(self, db_session: Session):
        user = make_user(db_session, "newcomer")

        stats = get_reading_stats(db_session, user.id)

        assert stats.counts.model_dump() == {
            "total_books_read": 0,
            "total_books_reading": 0,
            "total_books_to_read": 0,
            "total_pages_read": 0,
            "total_reviews": 0,
            "total_lists": 0,
        }
        assert stats.rating_stats.average_rating == 0.0
        assert stats.rating_stats.total_ratings == 0
        assert stats.top_genres == []
        assert stats.trends.model_dump() == {
            "books_read_this_month": 0,
            "books_read_this_year": 0,
            "reviews_this_month": 0,
            "reviews_this_year": 0,
        }

    def test_user_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError):
            get_reading_stats(db_session, 99999)

    def test_panels_combined(
        self,
        db_session: Session,
        sample_user: User,
        sample_book: Book,
        sample_review: Review,
    ):
        set_reading_status(
            db_session,
            sample_user,
            sample_book,
            ReadingState.READ,
            finished_at=datetime(2024, 3, 2, tzinfo=UTC),
        )

        stats = get_reading_stats(
            db_session, sample_user.id, now=datetime(2024, 3, 20, tzinfo=UTC)
        )

        assert stats.counts.total_books_read == 1
        assert stats.counts.total_pages_read == 328
        assert stats.rating_stats.four_star_books == 1
        assert [g.genre_name for g in stats.top_genres] == ["Fiction"]
        assert stats.trends.books_read_this_month == 1
