from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserResponse(BaseModel):
    """Response model for user data. The password hash is never exposed."""

    id: UUID
    username: str
    email: str
    display_name: Optional[str]
    profile_picture_url: Optional[str]
    phone_number: Optional[str]
    is_18_plus: bool
    is_verified: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class RegisterUserRequest(BaseModel):
    """Input model for creating a user account."""

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=255, description="Email address")
    password_hash: str = Field(
        ..., min_length=1, max_length=255, description="Opaque password hash"
    )
    is_18_plus: bool = Field(..., description="User confirmed they are 18+")
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must be a valid email address")
        return value

    @field_validator("is_18_plus")
    @classmethod
    def require_adult(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must be 18 or older to register")
        return value


class UpdateProfileRequest(BaseModel):
    """Input model for profile updates. Omitted fields keep their value."""

    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    profile_picture_url: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
