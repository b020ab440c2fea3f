"""User account ORM model."""

from enum import Enum

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.shared.models import TimestampMixin


class UserRole(str, Enum):
    """Account roles. Admins manage the catalog, orders and dashboard."""

    USER = "user"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    """Storefront account.

    Attributes:
        id: Primary key.
        name: Display name.
        email: Login e-mail, stored lower-cased, unique.
        password_hash: bcrypt hash.
        role: 'user' or 'admin'.
        profile_picture_url: Avatar URL (optional).
    """

    # "user" is reserved in PostgreSQL
    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value)
    profile_picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_app_user_valid_role"),
    )

    @property
    def is_admin(self) -> bool:
        """True for admin accounts."""
        return self.role == UserRole.ADMIN.value
