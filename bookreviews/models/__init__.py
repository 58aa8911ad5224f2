"""
SQLAlchemy Models Package

Model Relationships:
- Genre <-> Book: Many-to-Many through book_genres
- User -> Review, Book -> Review: One-to-Many
- Review -> ReviewLike, Review -> ReviewComment: One-to-Many
- User/Book -> ReadingStatus: one row per (user, book)

Importing every model here registers it with Base.metadata, which Alembic
relies on.
"""

from bookreviews.models.user import User
from bookreviews.models.genre import Genre
from bookreviews.models.book import Book, book_genres
from bookreviews.models.review import Review
from bookreviews.models.interaction import ReviewComment, ReviewLike
from bookreviews.models.reading import LibraryList, ReadingState, ReadingStatus

__all__ = [
    "User",
    "Genre",
    "Book",
    "book_genres",
    "Review",
    "ReviewLike",
    "ReviewComment",
    "ReadingState",
    "ReadingStatus",
    "LibraryList",
]
