"""Account registration, login and profile updates."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.logging import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.features.auth.models import User, UserRole
from app.features.auth.schemas import LoginRequest, RegisterRequest

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Service for accounts and access tokens."""

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None:
        """Get a user by id."""
        return await db.get(User, user_id)

    async def get_user_by_email(self, db: AsyncSession, email: str) -> User | None:
        """Get a user by (lower-cased) e-mail."""
        stmt = select(User).where(User.email == email.lower())
        return (await db.execute(stmt)).scalar_one_or_none()

    async def register(self, db: AsyncSession, data: RegisterRequest) -> tuple[User, str]:
        """Create an account and issue its first token.

        Returns:
            Tuple of (user, access token).

        Raises:
            ConflictError: If the e-mail is already registered.
        """
        if await self.get_user_by_email(db, data.email) is not None:
            raise ConflictError("Email is already registered", details={"email": data.email})

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=UserRole.USER.value,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            raise ConflictError(
                "Email is already registered", details={"email": data.email}
            ) from e
        await db.refresh(user)

        logger.info("auth.user_registered", user_id=user.id)
        return user, create_access_token(user.id, user.email, user.role)

    async def login(self, db: AsyncSession, data: LoginRequest) -> str:
        """Verify credentials and issue a token.

        Raises:
            UnauthorizedError: Unknown e-mail or wrong password (same message).
        """
        user = await self.get_user_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.warning("auth.login_failed", email_known=user is not None)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("auth.login_succeeded", user_id=user.id)
        return create_access_token(user.id, user.email, user.role)

    async def update_profile_picture(
        self,
        db: AsyncSession,
        user: User,
        picture_url: str,
    ) -> User:
        """Set the avatar URL."""
        user.profile_picture_url = picture_url or None
        await db.flush()
        await db.refresh(user)
        logger.info("auth.profile_picture_updated", user_id=user.id)
        return user

    async def update_profile_name(self, db: AsyncSession, user: User, name: str) -> User:
        """Set the display name."""
        user.name = name
        await db.flush()
        await db.refresh(user)
        logger.info("auth.profile_name_updated", user_id=user.id)
        return user
