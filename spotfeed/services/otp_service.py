import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spotfeed.errors import (
    ExpiredError,
    NotFoundError,
    SpotFeedError,
    ValidationError,
    translate_integrity_error,
    validate_input,
)
from spotfeed.models.api.otp_codes import OtpCodeResponse, VerifyOtpRequest
from spotfeed.models.api.users import UserResponse
from spotfeed.repositories.otp_code_repository import OtpCodeRepository
from spotfeed.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)

OTP_LENGTH = 6


def default_otp_ttl() -> timedelta:
    return timedelta(minutes=float(os.getenv("OTP_TTL_MINUTES", "10")))


def generate_code() -> str:
    """Random 6-digit decimal code."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


class OtpService:
    """Issues and consumes one-time e-mail verification codes.

    Delivery of the code is left to the caller.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.otp_repo = OtpCodeRepository(db)
        self.user_repo = UserRepository(db)

    async def issue_code(
        self,
        user_id: UUID,
        now: Optional[datetime] = None,
        ttl: Optional[timedelta] = None,
    ) -> OtpCodeResponse:
        """Create a fresh code for a user, invalidating any outstanding ones."""
        now = now or datetime.now(timezone.utc)
        ttl = ttl if ttl is not None else default_otp_ttl()
        if ttl <= timedelta(0):
            raise ValidationError("OTP ttl must be positive")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        try:
            otp, invalidated = await self.otp_repo.issue(
                user_id, generate_code(), now + ttl
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(
                e,
                not_found=f"User {user_id} not found",
                conflict="OTP code could not be issued",
            ) from e

        logger.info(
            "otp_issued",
            user_id=str(user_id),
            invalidated=invalidated,
            expires_at=otp.expires_at.isoformat(),
        )
        return otp

    async def verify_code(
        self, email: str, code: str, now: Optional[datetime] = None
    ) -> UserResponse:
        """
        Consume a code and mark the user's e-mail verified:

        1. Find the user by e-mail
        2. Find the newest unused matching code and check its expiry
        3. Flip is_used (only if still unused) and set is_verified in one commit
        """
        request = validate_input(VerifyOtpRequest, email=email, code=code)
        now = now or datetime.now(timezone.utc)

        user = await self.user_repo.get_by_email(request.email)
        if not user:
            raise NotFoundError("User not found")

        otp = await self.otp_repo.get_latest_unused(user.id, request.code)
        if not otp:
            raise ValidationError("Invalid OTP code")
        if not otp.is_valid(now):
            raise ExpiredError("OTP code expired")

        try:
            if not await self.otp_repo.consume(otp.id):
                raise ValidationError("Invalid OTP code")
            await self.user_repo.mark_verified(user.id)
            await self.db.commit()
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info("email_verified", user_id=str(user.id))
        return user.model_copy(update={"is_verified": True})

    async def purge_stale_codes(self, now: Optional[datetime] = None) -> int:
        """Delete codes that can never be used again."""
        now = now or datetime.now(timezone.utc)
        count = await self.otp_repo.delete_stale(now)
        if count:
            logger.info("otp_codes_purged", count=count)
        return count
