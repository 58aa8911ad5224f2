"""
Pydantic Schemas Package

Request and response shapes for the HTTP boundary. They are kept separate
from the SQLAlchemy models so the API controls exactly what it exposes.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from bookreviews.schemas.comment import CommentCreate, CommentResponse
from bookreviews.schemas.review import (
    BookRatingStats,
    BookReviewsResponse,
    LikeStatusResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.schemas.stats import (
    GenreStats,
    RatingStats,
    ReadingCounts,
    ReadingStatsResponse,
    ReadingTrends,
)

__all__ = [
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "BookReviewsResponse",
    "BookRatingStats",
    "LikeStatusResponse",
    # Comment schemas
    "CommentCreate",
    "CommentResponse",
    # Statistics schemas
    "ReadingCounts",
    "RatingStats",
    "GenreStats",
    "ReadingTrends",
    "ReadingStatsResponse",
]
