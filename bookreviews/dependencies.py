"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

- DbSession: one SQLAlchemy session per request, closed afterwards
- CurrentUserId: the authenticated caller's user id from the bearer token

Identity comes from a JWT issued by the account service. The token is
verified here without touching the database; services re-check that the
user exists where it matters.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookreviews.database import get_db
from bookreviews.services.security import verify_token_type

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_reviews(db: Session = Depends(get_db)):
#
# You can write:
#   def get_reviews(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Authentication
# =============================================================================
# auto_error=False so a missing header gets the same 401 as a bad token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """
    Extract the current user's id from the JWT access token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Decodes and validates the JWT (signature, expiry, type == "access")
    3. Returns the integer "sub" claim

    Raises:
        HTTPException: 401 if the token is missing, invalid or has no usable subject
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = verify_token_type(credentials.credentials, "access")
    if payload is None:
        raise credentials_exception

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception

    try:
        return int(subject)
    except (TypeError, ValueError):
        raise credentials_exception from None


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
