"""FastAPI dependencies for bearer authentication and role checks."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.logging import user_id_ctx
from app.core.security import decode_access_token
from app.features.auth.models import User
from app.features.auth.service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user.

    Raises:
        UnauthorizedError: Missing/invalid/expired token, or the user no
            longer exists.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing token")

    claims = decode_access_token(credentials.credentials)
    user = await AuthService().get_user(db, claims.user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists")

    user_id_ctx.set(user.id)
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only admin accounts.

    Raises:
        ForbiddenError: For non-admin users.
    """
    if not user.is_admin:
        raise ForbiddenError("You need admin privileges to access this resource.")
    return user
