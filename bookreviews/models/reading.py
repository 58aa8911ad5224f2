"""
Reading Models

Shelf data owned by the library service and read by the statistics engine:

- ReadingStatus: where a user is with a book (want to read, reading, read)
- LibraryList: user-curated book lists (only counted here)
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreviews.database import Base
from bookreviews.models.book import Book


class ReadingState(str, Enum):
    """
    Reading progress for a (user, book) pair.

    - WANT_TO_READ: On the to-read shelf
    - READING: Currently reading
    - READ: Finished; finished_at records when
    """
    WANT_TO_READ = "WANT_TO_READ"
    READING = "READING"
    READ = "READ"


class ReadingStatus(Base):
    """
    Reading status of a book for a user.

    Table: reading_statuses
    """

    __tablename__ = "reading_statuses"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=ReadingState.WANT_TO_READ.value,
        nullable=False,
        comment="WANT_TO_READ, READING or READ"
    )

    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the book was finished (status READ)"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    book: Mapped[Book] = relationship("Book")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_reading_status_user_book"),
    )

    def __repr__(self) -> str:
        return (
            f"ReadingStatus(user_id={self.user_id}, book_id={self.book_id}, "
            f"status='{self.status}')"
        )


class LibraryList(Base):
    """
    A named list of books curated by a user.

    Table: library_lists
    """

    __tablename__ = "library_lists"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"LibraryList(id={self.id}, user_id={self.user_id}, name='{self.name}')"
