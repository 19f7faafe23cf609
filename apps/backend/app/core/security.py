"""Password hashing and the signed session cookie value."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from app.core.config import get_settings

settings = get_settings()

SESSION_TOKEN_TYPE = "session"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password against the stored bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_session_token(
    user_id: UUID,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign the value stored in the session cookie.

    The token expires together with the cookie unless ``expires_delta``
    says otherwise.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(seconds=settings.session_max_age_seconds)

    claims = {
        "sub": str(user_id),
        "typ": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def read_session_token(token: str) -> UUID | None:
    """
    Return the user id carried by a session token.

    Returns None for tokens that are expired, tampered with, not session
    tokens or carry no valid user id.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    if claims.get("typ") != SESSION_TOKEN_TYPE:
        return None

    try:
        return UUID(str(claims.get("sub")))
    except ValueError:
        return None
