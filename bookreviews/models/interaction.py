"""
Review Interaction Models

- ReviewLike: a user's endorsement of a review. The composite primary key
  (review_id, user_id) is the only guard against duplicate likes, so two
  concurrent like requests cannot both succeed. Unlike removes the row.
- ReviewComment: a text reply to a review. Soft-deleted by its author.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreviews.database import Base

if TYPE_CHECKING:
    from bookreviews.models.review import Review
    from bookreviews.models.user import User


class ReviewLike(Base):
    """
    Like edge between a user and a review.

    Table: review_likes
    """

    __tablename__ = "review_likes"

    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    review: Mapped["Review"] = relationship("Review", back_populates="likes")

    def __repr__(self) -> str:
        return f"<ReviewLike(review_id={self.review_id}, user_id={self.user_id})>"


class ReviewComment(Base):
    """
    Comment on a review.

    Table: review_comments

    Attributes:
        id: Primary key
        review_id: Review being discussed
        user_id: Comment author
        body: Comment text (1-1000 chars, not blank)
        is_deleted: Soft-delete flag
        created_at: When the comment was posted
    """

    __tablename__ = "review_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Comment text",
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Soft-delete flag",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    review: Mapped["Review"] = relationship("Review", back_populates="comments")
    user: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        return (
            f"<ReviewComment(id={self.id}, review_id={self.review_id}, "
            f"user_id={self.user_id}, is_deleted={self.is_deleted})>"
        )
