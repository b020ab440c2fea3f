"""API routes for registration, login and the caller's profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import get_logger
from app.features.auth.deps import get_current_user
from app.features.auth.models import User
from app.features.auth.schemas import (
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UpdateNameRequest,
    UpdatePictureRequest,
    UserProfile,
)
from app.features.auth.service import AuthService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    summary="Register a new account",
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    """Create an account with role 'user' and return a token for it.

    Raises:
        ConflictError: If the e-mail is already registered.
    """
    user, token = await AuthService().register(db=db, data=request)
    return RegisterResponse(token=token, user=UserProfile.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange credentials for an access token",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Verify e-mail and password.

    Raises:
        UnauthorizedError: If the credentials do not match.
    """
    token = await AuthService().login(db=db, data=request)
    return TokenResponse(token=token)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get the caller's profile",
)
async def get_profile(user: User = Depends(get_current_user)) -> ProfileResponse:
    """Return the authenticated user's profile."""
    return ProfileResponse(user=UserProfile.model_validate(user))


@router.put(
    "/profile/picture",
    response_model=ProfileResponse,
    summary="Update the caller's profile picture",
)
async def update_profile_picture(
    request: UpdatePictureRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Set the caller's avatar URL."""
    updated = await AuthService().update_profile_picture(
        db=db, user=user, picture_url=request.profile_picture
    )
    return ProfileResponse(
        user=UserProfile.model_validate(updated),
        message="Profile picture updated successfully",
    )


@router.put(
    "/profile/name",
    response_model=ProfileResponse,
    summary="Update the caller's display name",
)
async def update_profile_name(
    request: UpdateNameRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Set the caller's display name."""
    updated = await AuthService().update_profile_name(db=db, user=user, name=request.name)
    return ProfileResponse(
        user=UserProfile.model_validate(updated),
        message="Profile name updated successfully",
    )
