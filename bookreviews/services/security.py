"""
Security Service

JWT access token handling. Tokens are issued by the account service; this
API only verifies them with the shared secret and reads the user id from
the "sub" claim.

Usage:
    from bookreviews.services.security import verify_token_type

    payload = verify_token_type(token, "access")
"""

import logging

from jose import JWTError, jwt

from bookreviews.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------

ALGORITHM = "HS256"


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_token_type(token: str, expected_type: str) -> dict | None:
    """
    Decode a token and verify its type.

    Returns:
        Decoded payload if valid and correct type, None otherwise
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}")
        return None

    return payload
