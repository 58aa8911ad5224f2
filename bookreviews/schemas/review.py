"""
Review Pydantic Schemas

Schemas:
- ReviewBase: Shared fields for review operations
- ReviewCreate: Create a new review
- ReviewUpdate: Partially update an existing review
- ReviewResponse: Review with denormalized book/user fields and live counts
- BookReviewsResponse: A book's reviews plus its rating aggregate
- BookRatingStats: Rating aggregate with star distribution

Business Rules:
- Rating must be 1.0-5.0 (validated here and re-checked by the services)
- One active review per user per book (enforced at database level)
- Users can only edit/delete their own reviews
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


# =============================================================================
# Request Schemas
# =============================================================================


class ReviewBase(BaseModel):
    """
    Base schema with shared review fields.

    Contains validation for:
    - Rating (1.0-5.0, one decimal place)
    - Title length
    - Body length
    """

    rating: Decimal | None = Field(
        default=None,
        ge=Decimal("1.0"),
        le=Decimal("5.0"),
        max_digits=2,
        decimal_places=1,
        description="Rating from 1.0 to 5.0",
        examples=[4.5, 3],
    )

    title: str | None = Field(
        default=None,
        max_length=140,
        description="Optional review title/headline",
        examples=["A masterpiece!", "Disappointing read"],
    )

    body: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text content",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("title", "body")
    @classmethod
    def text_must_not_be_blank_if_provided(cls, v: str | None) -> str | None:
        """Whitespace-only text is treated as not provided."""
        return _blank_to_none(v)


class ReviewCreate(ReviewBase):
    """
    Schema for creating a new review.

    Example request body:
    {
        "book_id": 42,
        "rating": 4.5,
        "title": "Amazing book!",
        "body": "One of the best books I've ever read..."
    }
    """

    book_id: int = Field(..., ge=1, description="ID of the book being reviewed")


class ReviewUpdate(ReviewBase):
    """
    Schema for updating an existing review.

    All fields are optional; omitted fields are left unchanged.
    """

    pass


# =============================================================================
# Response Schemas
# =============================================================================


class ReviewResponse(BaseModel):
    """
    Schema for review responses.

    Includes:
    - Review data (rating, title, body)
    - Denormalized book info (title, cover)
    - Denormalized author info (username, display name, avatar)
    - Live like and comment counts
    - Timestamps formatted as "YYYY-MM-DD HH:MM:SS"
    """

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    book_title: str = Field(..., description="Title of the reviewed book")
    book_cover: str | None = Field(default=None, description="Cover image URL")
    user_id: int = Field(..., description="ID of the review author")
    username: str = Field(..., description="Username of the review author")
    display_name: str = Field(..., description="Full name, or username when unset")
    user_avatar: str | None = Field(default=None, description="Author avatar URL")
    rating: float = Field(..., ge=0, le=5, description="Rating, 0.0 when unrated")
    title: str | None = Field(default=None, description="Review title")
    body: str | None = Field(default=None, description="Review text")
    created_at: str = Field(..., description="When the review was created")
    updated_at: str = Field(..., description="When the review was last updated")
    likes: int = Field(default=0, ge=0, description="Number of likes")
    comments: int = Field(default=0, ge=0, description="Number of active comments")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "book_title": "1984",
                "book_cover": "https://covers.example.com/1984.jpg",
                "user_id": 7,
                "username": "booklover",
                "display_name": "Jane Doe",
                "user_avatar": None,
                "rating": 4.5,
                "title": "A must-read classic!",
                "body": "This book completely changed my perspective on...",
                "created_at": "2024-01-15 10:30:00",
                "updated_at": "2024-01-15 10:30:00",
                "likes": 12,
                "comments": 3,
            }
        },
    )


class BookReviewsResponse(BaseModel):
    """Reviews for a book, newest first, with the book's rating aggregate."""

    book_id: int = Field(..., description="Book ID")
    book_title: str = Field(..., description="Book title")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0 means no ratings)",
    )
    total_reviews: int = Field(..., ge=0, description="Number of active reviews")
    reviews: list[ReviewResponse] = Field(default_factory=list)


class BookRatingStats(BaseModel):
    """
    Aggregated rating statistics for a book.

    Used to show average rating, total review count and star distribution.
    """

    book_id: int = Field(..., description="Book ID")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no ratings)"
    )
    total_reviews: int = Field(
        ...,
        ge=0,
        description="Total number of active reviews"
    )
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of ratings per star band (1-5)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "book_id": 42,
                "average_rating": 4.2,
                "total_reviews": 125,
                "rating_distribution": {
                    "1": 5,
                    "2": 10,
                    "3": 20,
                    "4": 40,
                    "5": 50
                }
            }
        },
    )


class LikeStatusResponse(BaseModel):
    """Whether the caller has liked a review."""

    review_id: int = Field(..., description="Review ID")
    liked: bool = Field(..., description="True if the caller liked the review")
