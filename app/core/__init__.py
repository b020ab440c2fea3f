"""Shop-wide infrastructure shared by every feature slice."""

from app.core.config import Settings, get_settings
from app.core.database import Base, get_db, session_scope
from app.core.exceptions import ShopError
from app.core.logging import get_logger, request_id_ctx, user_id_ctx

__all__ = [
    "Base",
    "Settings",
    "ShopError",
    "get_db",
    "get_logger",
    "get_settings",
    "request_id_ctx",
    "session_scope",
    "user_id_ctx",
]
