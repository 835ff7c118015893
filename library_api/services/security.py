"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Per-user password hashing with bcrypt (passlib)
2. JWT token generation and validation
3. Constant-time password verification

The signing secret is never read from module state: callers pass the
application's Settings, which carry secret_key, the algorithm and the
optional token lifetime.

Usage:
    from library_api.services.security import hash_password, verify_password

    hashed = hash_password("SecurePass123")
    is_valid = verify_password("SecurePass123", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from library_api.config import Settings

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt salts every hash, so two users with the same password still get
# different stored values.
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("SecurePass123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Tokens
# -------------------------------------------------------------------------


def create_access_token(
    data: dict[str, Any],
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed JWT.

    An `exp` claim is added only when an explicit expires_delta is given
    or settings.access_token_expire_minutes is set; otherwise the token
    stays valid for as long as the secret does.

    Args:
        data: Payload data to encode in the token
        settings: Application settings (secret and algorithm)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta is None and settings.access_token_expire_minutes is not None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    if expires_delta is not None:
        to_encode["exp"] = datetime.now(UTC) + expires_delta

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if the signature is wrong, the token
        is malformed or it has expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def create_user_token(user_id: int, username: str, settings: Settings) -> str:
    """Token issued on login, payload {username, id}."""
    return create_access_token({"username": username, "id": str(user_id)}, settings)
