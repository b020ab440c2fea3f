"""Pydantic schemas for authentication and profile endpoints."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """New account payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """E-mails are matched case-insensitively."""
        return v.lower()


class LoginRequest(BaseModel):
    """Credentials payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """E-mails are matched case-insensitively."""
        return v.lower()


class UserProfile(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str
    role: str
    profile_picture: str | None = Field(
        None,
        validation_alias=AliasChoices("profile_picture_url", "profilePicture", "profile_picture"),
        serialization_alias="profilePicture",
    )


class TokenResponse(BaseModel):
    """Login result."""

    token: str
    token_type: str = "bearer"


class RegisterResponse(BaseModel):
    """Registration result: a token and the created profile."""

    token: str
    token_type: str = "bearer"
    user: UserProfile


class ProfileResponse(BaseModel):
    """Profile wrapper, optionally with a confirmation message."""

    user: UserProfile
    message: str | None = None


class UpdatePictureRequest(BaseModel):
    """New avatar URL."""

    profile_picture: str = Field(..., alias="profilePicture", max_length=500)

    model_config = ConfigDict(populate_by_name=True)


class UpdateNameRequest(BaseModel):
    """New display name."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
