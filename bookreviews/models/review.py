"""
Review Model

Represents a user's review of a book: an optional 1.0-5.0 rating plus
optional title and body text.

Business Rules:
- At most one non-deleted review per user per book (partial unique index)
- Rating must be 1.0-5.0 when present
- Only the author can edit or delete a review
- Deletion is soft: the row is kept with is_deleted=True and never mutated again
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreviews.database import Base

if TYPE_CHECKING:
    from bookreviews.models.book import Book
    from bookreviews.models.interaction import ReviewComment, ReviewLike
    from bookreviews.models.user import User


class Review(Base):
    """
    Review model for book reviews.

    Attributes:
        id: Primary key
        book_id: Foreign key to books table
        user_id: Foreign key to users table
        rating: Optional 1.0-5.0 rating with one decimal place
        title: Optional review title (max 140 chars)
        body: Optional review text (max 5000 chars)
        is_deleted: Soft-delete flag
        created_at: When the review was created
        updated_at: When the review was last updated
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    rating: Mapped[Decimal | None] = mapped_column(
        Numeric(2, 1),
        nullable=True,
        comment="Rating from 1.0 to 5.0",
    )
    title: Mapped[str | None] = mapped_column(
        String(140),
        nullable=True,
        comment="Optional review title",
    )
    body: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Review text content",
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
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    likes: Mapped[list["ReviewLike"]] = relationship(
        "ReviewLike",
        back_populates="review",
        cascade="all, delete-orphan",
    )
    comments: Mapped[list["ReviewComment"]] = relationship(
        "ReviewComment",
        back_populates="review",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # One active review per user per book; deleted rows are kept for history
        Index(
            "uq_reviews_active_user_book",
            "user_id",
            "book_id",
            unique=True,
            sqlite_where=text("is_deleted = 0"),
            postgresql_where=text("is_deleted = false"),
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1.0 AND rating <= 5.0)",
            name="ck_review_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, "
            f"rating={self.rating}, is_deleted={self.is_deleted})>"
        )
