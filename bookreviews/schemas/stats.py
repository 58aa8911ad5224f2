"""
Reading Statistics Schemas

ReadingStatsResponse bundles four independently computed panels:
- ReadingCounts: shelf counts, pages read, reviews and lists
- RatingStats: average rating and star-band histogram
- GenreStats: top genres among finished books
- ReadingTrends: finished books and reviews this month / this year

Every field has a zero default so a brand-new reader gets a fully
populated, null-free response.
"""

from pydantic import BaseModel, Field


class ReadingCounts(BaseModel):
    """Shelf and activity counts."""

    total_books_read: int = Field(default=0, ge=0)
    total_books_reading: int = Field(default=0, ge=0)
    total_books_to_read: int = Field(default=0, ge=0)
    total_pages_read: int = Field(default=0, ge=0)
    total_reviews: int = Field(default=0, ge=0)
    total_lists: int = Field(default=0, ge=0)


class RatingStats(BaseModel):
    """
    Rating histogram over the reader's own active reviews.

    Bands are lower-inclusive: a 1.5 is a two-star rating, a 4.5 five-star.
    """

    average_rating: float = Field(default=0.0, ge=0, le=5)
    total_ratings: int = Field(default=0, ge=0)
    five_star_books: int = Field(default=0, ge=0)
    four_star_books: int = Field(default=0, ge=0)
    three_star_books: int = Field(default=0, ge=0)
    two_star_books: int = Field(default=0, ge=0)
    one_star_books: int = Field(default=0, ge=0)


class GenreStats(BaseModel):
    """Share of finished books carrying a genre."""

    genre_name: str = Field(..., description="Genre name")
    book_count: int = Field(..., ge=0, description="Finished books in this genre")
    percentage: float = Field(
        ...,
        ge=0,
        le=100,
        description="Percent of all finished books, one decimal place",
    )


class ReadingTrends(BaseModel):
    """Activity in the current calendar month and year."""

    books_read_this_month: int = Field(default=0, ge=0)
    books_read_this_year: int = Field(default=0, ge=0)
    reviews_this_month: int = Field(default=0, ge=0)
    reviews_this_year: int = Field(default=0, ge=0)


class ReadingStatsResponse(BaseModel):
    """Complete reading statistics for one user."""

    counts: ReadingCounts = Field(default_factory=ReadingCounts)
    rating_stats: RatingStats = Field(default_factory=RatingStats)
    top_genres: list[GenreStats] = Field(default_factory=list)
    trends: ReadingTrends = Field(default_factory=ReadingTrends)
