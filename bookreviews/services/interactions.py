"""
Review Interaction Service

Likes and comments on reviews.

Likes are a two-state edge per (review, user): absent or liked.
- like inserts the edge; the composite primary key rejects duplicates, so
  concurrent likes produce exactly one row and one success
- unlike is a single DELETE; removing nothing is a conflict

Comments are soft-deleted by their author and listed oldest first. The
soft delete is a conditional UPDATE, so deleting twice is always a conflict.
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookreviews.models import ReviewComment, ReviewLike
from bookreviews.services.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from bookreviews.services.reviews import get_review, get_user_or_raise

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


# =============================================================================
# Likes
# =============================================================================


def like_review(db: Session, user_id: int, review_id: int) -> None:
    """
    Like a review.

    Raises:
        NotFoundError: If the review or user does not exist
        ConflictError: If the review is deleted or already liked by the user
    """
    review = get_review(db, review_id)
    get_user_or_raise(db, user_id)

    if review.is_deleted:
        logger.warning(f"Like rejected for deleted review {review_id}")
        raise ConflictError("Cannot like a deleted review")

    try:
        db.execute(insert(ReviewLike).values(review_id=review_id, user_id=user_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"User {user_id} already liked review {review_id}")
        raise ConflictError("You have already liked this review") from None

    logger.info(f"User {user_id} liked review {review_id}")


def unlike_review(db: Session, user_id: int, review_id: int) -> None:
    """
    Remove a like.

    Raises:
        NotFoundError: If the review does not exist
        ConflictError: If the user has not liked the review
    """
    get_review(db, review_id)

    result = db.execute(
        delete(ReviewLike).where(
            ReviewLike.review_id == review_id,
            ReviewLike.user_id == user_id,
        )
    )

    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"User {user_id} has not liked review {review_id}")
        raise ConflictError("You have not liked this review")

    db.commit()

    logger.info(f"User {user_id} unliked review {review_id}")


def has_liked(db: Session, user_id: int, review_id: int) -> bool:
    """Check whether a user has liked a review."""
    stmt = select(ReviewLike.review_id).where(
        ReviewLike.review_id == review_id,
        ReviewLike.user_id == user_id,
    )
    return db.execute(stmt).first() is not None


# =============================================================================
# Comments
# =============================================================================


def get_comment(db: Session, comment_id: int) -> ReviewComment:
    """
    Get a comment by ID with its author loaded.

    Raises:
        NotFoundError: If no comment has this ID
    """
    stmt = (
        select(ReviewComment)
        .options(selectinload(ReviewComment.user))
        .where(ReviewComment.id == comment_id)
    )
    comment = db.execute(stmt).scalar_one_or_none()

    if comment is None:
        raise NotFoundError(f"Comment with id {comment_id} not found")
    return comment


def add_comment(db: Session, user_id: int, review_id: int, body: str) -> ReviewComment:
    """
    Comment on a review.

    Args:
        db: Database session
        user_id: Comment author
        review_id: Review being discussed
        body: Comment text, not blank and at most 1000 characters

    Returns:
        The persisted comment with its author loaded

    Raises:
        InvalidInputError: If the body is blank or too long
        NotFoundError: If the review or user does not exist
        ConflictError: If the review is deleted
    """
    if body is None or not body.strip():
        raise InvalidInputError("Comment body is required")
    if len(body) > MAX_COMMENT_LENGTH:
        raise InvalidInputError(
            f"Comment must be at most {MAX_COMMENT_LENGTH} characters"
        )

    review = get_review(db, review_id)
    get_user_or_raise(db, user_id)

    if review.is_deleted:
        logger.warning(f"Comment rejected for deleted review {review_id}")
        raise ConflictError("Cannot comment on a deleted review")

    comment = ReviewComment(
        review_id=review_id,
        user_id=user_id,
        body=body,
        is_deleted=False,
    )
    db.add(comment)
    db.commit()

    logger.info(f"Comment {comment.id} added by user {user_id} on review {review_id}")

    return get_comment(db, comment.id)


def delete_comment(db: Session, user_id: int, comment_id: int) -> None:
    """
    Soft-delete a comment.

    Raises:
        NotFoundError: If the comment does not exist
        ConflictError: If the comment is already deleted
        ForbiddenError: If the caller is not the author
    """
    comment = get_comment(db, comment_id)

    if comment.is_deleted:
        logger.warning(f"Delete rejected for already deleted comment {comment_id}")
        raise ConflictError("Comment is already deleted")

    if comment.user_id != user_id:
        raise ForbiddenError("You can only delete your own comments")

    # is_deleted is re-checked by the UPDATE so concurrent deletes yield one success
    result = db.execute(
        update(ReviewComment)
        .where(ReviewComment.id == comment_id, ReviewComment.is_deleted == False)  # noqa: E712
        .values(is_deleted=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Delete rejected for comment {comment_id} deleted concurrently")
        raise ConflictError("Comment is already deleted")

    db.commit()

    logger.info(f"Comment {comment_id} deleted by user {user_id}")


def get_review_comments(db: Session, review_id: int) -> list[ReviewComment]:
    """
    List a review's active comments, oldest first.

    Raises:
        NotFoundError: If the review does not exist
    """
    get_review(db, review_id)

    stmt = (
        select(ReviewComment)
        .options(selectinload(ReviewComment.user))
        .where(
            ReviewComment.review_id == review_id,
            ReviewComment.is_deleted == False,  # noqa: E712
        )
        .order_by(ReviewComment.created_at.asc(), ReviewComment.id.asc())
    )
    return list(db.execute(stmt).scalars().all())
