from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OtpCodeResponse(BaseModel):
    """Response model for OTP code data."""

    id: UUID
    user_id: UUID
    code: str
    expires_at: datetime
    is_used: bool
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)

    def is_valid(self, now: datetime) -> bool:
        """A code is valid only while unused and before its expiry."""
        return not self.is_used and now < self.expires_at


class VerifyOtpRequest(BaseModel):
    """Input model for consuming a verification code."""

    email: str = Field(..., max_length=255)
    code: str = Field(..., pattern=r"^[0-9]{6}$", description="6-digit OTP code")
