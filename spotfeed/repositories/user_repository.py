from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spotfeed.models.api.users import (
    RegisterUserRequest,
    UpdateProfileRequest,
    UserResponse,
)
from spotfeed.models.db.user_model import UserModel
from spotfeed.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[UserModel, UserResponse]):
    """Repository for user operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserModel)

    async def get_by_email(self, email: str) -> Optional[UserResponse]:
        """Get a user by email (stored lower-cased)."""
        query = select(self.model_class).where(
            self.model_class.email == email.strip().lower()
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_by_username(self, username: str) -> Optional[UserResponse]:
        """Get a user by exact username."""
        query = select(self.model_class).where(self.model_class.username == username)
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def create_user(self, request: RegisterUserRequest) -> UserResponse:
        """Insert a new user. Uniqueness is enforced by the database."""
        return await self.create(
            UserModel(
                username=request.username,
                email=request.email,
                password_hash=request.password_hash,
                is_18_plus=request.is_18_plus,
                is_verified=False,
                display_name=request.display_name,
                phone_number=request.phone_number,
            )
        )

    async def update_profile(
        self, user_id: UUID, request: UpdateProfileRequest
    ) -> Optional[UserResponse]:
        """Update only the profile fields that were provided."""
        values = request.model_dump(exclude_none=True)
        stmt = (
            update(self.model_class)
            .where(self.model_class.id == user_id)
            .values(**values, updated_at=func.now())
            .returning(self.model_class)
        )
        result = await self.db.execute(stmt)
        db_model = result.scalar_one_or_none()
        await self.db.commit()
        return self._to_pydantic(db_model) if db_model else None

    async def mark_verified(self, user_id: UUID) -> bool:
        """Stage setting is_verified; the caller commits."""
        stmt = (
            update(self.model_class)
            .where(self.model_class.id == user_id)
            .values(is_verified=True, updated_at=func.now())
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    def _to_pydantic(self, db_model: Any) -> UserResponse:
        """Convert SQLAlchemy UserModel to Pydantic UserResponse."""
        return UserResponse(
            id=db_model.id,
            username=db_model.username,
            email=db_model.email,
            display_name=db_model.display_name,
            profile_picture_url=db_model.profile_picture_url,
            phone_number=db_model.phone_number,
            is_18_plus=bool(db_model.is_18_plus),
            is_verified=bool(db_model.is_verified),
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )
