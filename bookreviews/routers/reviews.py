"""
Reviews Router

Endpoints for the review lifecycle and book rating aggregates.

Endpoints:
- POST /reviews - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Soft-delete a review (author only)
- GET /reviews/book/{book_id} - Active reviews for a book with its average
- GET /reviews/book/{book_id}/my-review - The caller's review of a book
- GET /users/{user_id}/reviews - Active reviews written by a user
- GET /books/{book_id}/rating - Book rating statistics

Business Rules:
- One active review per user per book (enforced by database constraint)
- Only the review author can update or delete their review
- Deleted reviews disappear from every listing and aggregate

Domain errors raised by the services are mapped to HTTP status codes by the
exception handlers registered in main.py.
"""

from fastapi import APIRouter, status

from bookreviews.dependencies import CurrentUserId, DbSession
from bookreviews.schemas.review import (
    BookRatingStats,
    BookReviewsResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.services import reviews as review_service
from bookreviews.services.responses import to_book_reviews_response, to_review_response
from bookreviews.services.stats import get_book_rating_stats

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review, book or user not found"},
    },
)


# =============================================================================
# Review Lifecycle Endpoints
# =============================================================================


@router.post(
    "/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a review for a book. One active review per book per user.",
    responses={409: {"description": "Book already reviewed by this user"}},
)
def create_review(
    review_data: ReviewCreate,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> ReviewResponse:
    """
    Create a new review for a book.

    Args:
        review_data: Book ID and review content (rating, title, body)
        current_user_id: Authenticated user creating the review

    Returns:
        Created review with book and author info
    """
    review = review_service.create_review(
        db,
        current_user_id,
        review_data.book_id,
        rating=review_data.rating,
        title=review_data.title,
        body=review_data.body,
    )
    return to_review_response(db, review)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. Omitted fields are left unchanged.",
    responses={
        403: {"description": "Not the review author"},
        409: {"description": "Review is deleted"},
    },
)
def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> ReviewResponse:
    """
    Update an existing review.

    Only the review author can update their review.
    """
    review = review_service.update_review(
        db,
        current_user_id,
        review_id,
        rating=review_data.rating,
        title=review_data.title,
        body=review_data.body,
    )
    return to_review_response(db, review)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Soft-delete your own review.",
    responses={
        403: {"description": "Not the review author"},
        409: {"description": "Review already deleted"},
    },
)
def delete_review(
    review_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> None:
    """Soft-delete a review. Only the author can delete it."""
    review_service.delete_review(db, current_user_id, review_id)


# =============================================================================
# Review Listings
# =============================================================================


@router.get(
    "/reviews/book/{book_id}",
    response_model=BookReviewsResponse,
    summary="List reviews for a book",
    description="Active reviews for a book, newest first, with its average rating.",
)
def list_book_reviews(
    book_id: int,
    db: DbSession,
) -> BookReviewsResponse:
    book_reviews = review_service.get_book_reviews(db, book_id)
    return to_book_reviews_response(
        db,
        book_reviews.book,
        book_reviews.reviews,
        book_reviews.average_rating,
        book_reviews.total_reviews,
    )


@router.get(
    "/reviews/book/{book_id}/my-review",
    response_model=ReviewResponse,
    summary="Get my review of a book",
    description="The authenticated user's active review of a book.",
)
def get_my_review(
    book_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> ReviewResponse:
    review = review_service.get_user_review_for_book(db, current_user_id, book_id)
    return to_review_response(db, review)


@router.get(
    "/users/{user_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews by a user",
    description="Active reviews written by a user, newest first.",
)
def list_user_reviews(
    user_id: int,
    db: DbSession,
) -> list[ReviewResponse]:
    reviews = review_service.get_user_reviews(db, user_id)
    return [to_review_response(db, review) for review in reviews]


@router.get(
    "/books/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Average rating, review count and star distribution for a book.",
)
def book_rating_stats(
    book_id: int,
    db: DbSession,
) -> BookRatingStats:
    """
    Get rating statistics for a book.

    Returns:
        - Average rating
        - Total active review count
        - Rating distribution per star band (1-5)
    """
    return get_book_rating_stats(db, book_id)
