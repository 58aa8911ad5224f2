"""
Comment Pydantic Schemas

- CommentCreate: Body of a new comment (required, not blank, max 1000 chars)
- CommentResponse: Comment with denormalized author fields
"""

from pydantic import BaseModel, Field, field_validator


class CommentCreate(BaseModel):
    """
    Schema for adding a comment to a review.

    Example request body:
    {
        "body": "Totally agree with the part about the ending."
    }
    """

    body: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Comment text",
        examples=["Totally agree with the part about the ending."],
    )

    @field_validator("body")
    @classmethod
    def body_must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only comments."""
        if not v.strip():
            raise ValueError("Comment body is required")
        return v


class CommentResponse(BaseModel):
    """Schema for comment responses."""

    id: int = Field(..., description="Comment ID")
    review_id: int = Field(..., description="Review the comment belongs to")
    user_id: int = Field(..., description="Comment author ID")
    username: str = Field(..., description="Comment author username")
    display_name: str = Field(..., description="Full name, or username when unset")
    user_avatar: str | None = Field(default=None, description="Author avatar URL")
    body: str = Field(..., description="Comment text")
    created_at: str = Field(..., description="When the comment was posted")
