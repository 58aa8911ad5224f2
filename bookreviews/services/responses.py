"""
Response Assembly

Translates ORM rows and aggregates into response schemas. Shape translation
only: denormalized book/author fields, rounded ratings, formatted timestamps
and live like/comment counts.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from bookreviews.models import Book, Review, ReviewComment
from bookreviews.schemas.comment import CommentResponse
from bookreviews.schemas.review import BookReviewsResponse, ReviewResponse
from bookreviews.schemas.stats import (
    GenreStats,
    RatingStats,
    ReadingCounts,
    ReadingStatsResponse,
    ReadingTrends,
)
from bookreviews.services.stats import count_review_comments, count_review_likes

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp as YYYY-MM-DD HH:MM:SS, empty string if missing."""
    if value is None:
        return ""
    return value.strftime(TIMESTAMP_FORMAT)


def to_review_response(db: Session, review: Review) -> ReviewResponse:
    """Build a review response with live like and comment counts."""
    book = review.book
    user = review.user

    return ReviewResponse(
        id=review.id,
        book_id=review.book_id,
        book_title=book.title,
        book_cover=book.cover_url,
        user_id=review.user_id,
        username=user.username,
        display_name=user.display_name,
        user_avatar=user.avatar_url,
        rating=round(float(review.rating), 1) if review.rating is not None else 0.0,
        title=review.title,
        body=review.body,
        created_at=format_timestamp(review.created_at),
        updated_at=format_timestamp(review.updated_at),
        likes=count_review_likes(db, review.id),
        comments=count_review_comments(db, review.id),
    )


def to_comment_response(comment: ReviewComment) -> CommentResponse:
    user = comment.user

    return CommentResponse(
        id=comment.id,
        review_id=comment.review_id,
        user_id=comment.user_id,
        username=user.username,
        display_name=user.display_name,
        user_avatar=user.avatar_url,
        body=comment.body,
        created_at=format_timestamp(comment.created_at),
    )


def to_book_reviews_response(
    db: Session,
    book: Book,
    reviews: list[Review],
    average_rating: float,
    total_reviews: int,
) -> BookReviewsResponse:
    return BookReviewsResponse(
        book_id=book.id,
        book_title=book.title,
        average_rating=average_rating,
        total_reviews=total_reviews,
        reviews=[to_review_response(db, review) for review in reviews],
    )


def to_reading_stats_response(
    counts: ReadingCounts,
    rating_stats: RatingStats,
    top_genres: list[GenreStats],
    trends: ReadingTrends,
) -> ReadingStatsResponse:
    return ReadingStatsResponse(
        counts=counts,
        rating_stats=rating_stats,
        top_genres=list(top_genres),
        trends=trends,
    )
