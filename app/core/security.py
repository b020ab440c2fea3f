"""Password hashing (bcrypt) and access tokens (JWT, PyJWT).

Token claims:
- sub: user id as a string
- email, role: copied from the user at issue time
- iat, exp: issue/expiry timestamps
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import get_settings
from app.core.exceptions import UnauthorizedError

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    """Decoded access token claims."""

    user_id: int
    email: str
    role: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    settings = get_settings()
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Malformed stored hashes verify as False rather than raising.
    """
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:BCRYPT_MAX_BYTES],
            password_hash.encode("utf-8"),
        )
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    now: datetime | None = None,
) -> str:
    """Issue a signed access token for a user.

    Args:
        user_id: User primary key.
        email: User e-mail.
        role: User role ('user' or 'admin').
        now: Issue time (defaults to current UTC time).

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """Verify and decode an access token.

    Args:
        token: Encoded JWT.

    Returns:
        Decoded claims.

    Raises:
        UnauthorizedError: If the token is expired, tampered with or malformed.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise UnauthorizedError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError("Invalid token") from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise UnauthorizedError("Invalid token subject") from e

    return TokenClaims(
        user_id=user_id,
        email=str(payload.get("email", "")),
        role=str(payload.get("role", "user")),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
    )
