from datetime import datetime
from typing import Any, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spotfeed.models.api.otp_codes import OtpCodeResponse
from spotfeed.models.db.otp_code_model import OtpCodeModel
from spotfeed.repositories.base_repository import BaseRepository


class OtpCodeRepository(BaseRepository[OtpCodeModel, OtpCodeResponse]):
    """Repository for OTP code operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, OtpCodeModel)

    async def invalidate_outstanding(self, user_id: UUID) -> int:
        """Stage marking every unused code of a user as used."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.user_id == user_id,
                self.model_class.is_used.is_(False),
            )
            .values(is_used=True)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def issue(
        self, user_id: UUID, code: str, expires_at: datetime
    ) -> Tuple[OtpCodeResponse, int]:
        """Invalidate outstanding codes and insert a new one in a single commit."""
        invalidated = await self.invalidate_outstanding(user_id)
        db_model = self.add(
            OtpCodeModel(
                user_id=user_id, code=code, expires_at=expires_at, is_used=False
            )
        )
        await self.db.commit()
        await self.db.refresh(db_model)
        return self._to_pydantic(db_model), invalidated

    async def get_latest_unused(
        self, user_id: UUID, code: str
    ) -> Optional[OtpCodeResponse]:
        """Newest unused code matching the submitted value."""
        query = (
            select(self.model_class)
            .where(
                self.model_class.user_id == user_id,
                self.model_class.code == code,
                self.model_class.is_used.is_(False),
            )
            .order_by(self.model_class.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def consume(self, code_id: UUID) -> bool:
        """Stage the one-way is_used transition; False if already consumed."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.id == code_id,
                self.model_class.is_used.is_(False),
            )
            .values(is_used=True)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def delete_stale(self, now: datetime) -> int:
        """Delete used or expired codes and commit."""
        stmt = delete(self.model_class).where(
            or_(
                self.model_class.is_used.is_(True),
                self.model_class.expires_at <= now,
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    def _to_pydantic(self, db_model: Any) -> OtpCodeResponse:
        """Convert SQLAlchemy OtpCodeModel to Pydantic OtpCodeResponse."""
        return OtpCodeResponse(
            id=db_model.id,
            user_id=db_model.user_id,
            code=db_model.code,
            expires_at=db_model.expires_at,
            is_used=bool(db_model.is_used),
            created_at=db_model.created_at,
        )
