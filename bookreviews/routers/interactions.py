"""
Review Interactions Router

Endpoints:
- POST /reviews/{review_id}/likes - Like a review (authenticated)
- DELETE /reviews/{review_id}/likes - Remove your like
- GET /reviews/{review_id}/likes/status - Whether you liked a review
- POST /reviews/{review_id}/comments - Comment on a review (authenticated)
- GET /reviews/{review_id}/comments - Active comments, oldest first
- DELETE /reviews/comments/{comment_id} - Soft-delete your comment
"""

from fastapi import APIRouter, status

from bookreviews.dependencies import CurrentUserId, DbSession
from bookreviews.schemas.comment import CommentCreate, CommentResponse
from bookreviews.schemas.review import LikeStatusResponse
from bookreviews.services import interactions as interaction_service
from bookreviews.services.responses import to_comment_response

router = APIRouter(
    tags=["Review Interactions"],
    responses={
        404: {"description": "Review or comment not found"},
    },
)


# =============================================================================
# Likes
# =============================================================================


@router.post(
    "/reviews/{review_id}/likes",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Like a review",
    responses={409: {"description": "Already liked, or review deleted"}},
)
def like_review(
    review_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> None:
    interaction_service.like_review(db, current_user_id, review_id)


@router.delete(
    "/reviews/{review_id}/likes",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlike a review",
    responses={409: {"description": "Review not liked"}},
)
def unlike_review(
    review_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> None:
    interaction_service.unlike_review(db, current_user_id, review_id)


@router.get(
    "/reviews/{review_id}/likes/status",
    response_model=LikeStatusResponse,
    summary="Check like status",
)
def like_status(
    review_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> LikeStatusResponse:
    return LikeStatusResponse(
        review_id=review_id,
        liked=interaction_service.has_liked(db, current_user_id, review_id),
    )


# =============================================================================
# Comments
# =============================================================================


@router.post(
    "/reviews/{review_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a review",
    responses={409: {"description": "Review deleted"}},
)
def add_comment(
    review_id: int,
    comment_data: CommentCreate,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> CommentResponse:
    comment = interaction_service.add_comment(
        db, current_user_id, review_id, comment_data.body
    )
    return to_comment_response(comment)


@router.get(
    "/reviews/{review_id}/comments",
    response_model=list[CommentResponse],
    summary="List comments on a review",
    description="Active comments in posting order.",
)
def list_comments(
    review_id: int,
    db: DbSession,
) -> list[CommentResponse]:
    comments = interaction_service.get_review_comments(db, review_id)
    return [to_comment_response(comment) for comment in comments]


@router.delete(
    "/reviews/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={
        403: {"description": "Not the comment author"},
        409: {"description": "Comment already deleted"},
    },
)
def delete_comment(
    comment_id: int,
    db: DbSession,
    current_user_id: CurrentUserId,
) -> None:
    interaction_service.delete_comment(db, current_user_id, comment_id)
