"""Authentication module: accounts, JWT login and profile management."""

from app.features.auth.deps import get_current_user, require_admin
from app.features.auth.models import User, UserRole
from app.features.auth.routes import router
from app.features.auth.service import AuthService

__all__ = [
    "AuthService",
    "User",
    "UserRole",
    "get_current_user",
    "require_admin",
    "router",
]
