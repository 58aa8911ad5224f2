"""Domain exceptions for the review services."""


class ReviewServiceError(Exception):
    """Base exception for all review service errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ReviewServiceError):
    """User, book, review or comment does not exist."""
    pass


class ForbiddenError(ReviewServiceError):
    """Caller does not own the review or comment."""
    pass


class ConflictError(ReviewServiceError):
    """Duplicate review or like, missing like, or target already deleted."""
    pass


class InvalidInputError(ReviewServiceError):
    """Rating out of range, text too long, or blank comment."""
    pass
