from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spotfeed.errors import NotFoundError, translate_integrity_error, validate_input
from spotfeed.models.api.users import (
    RegisterUserRequest,
    UpdateProfileRequest,
    UserResponse,
)
from spotfeed.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user accounts and profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def register_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        is_18_plus: bool,
        display_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> UserResponse:
        """Create an unverified account. Username and e-mail must be unused."""
        request = validate_input(
            RegisterUserRequest,
            username=username,
            email=email,
            password_hash=password_hash,
            is_18_plus=is_18_plus,
            display_name=display_name,
            phone_number=phone_number,
        )

        try:
            user = await self.user_repo.create_user(request)
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(
                e, not_found="User not found", conflict="User already exists"
            ) from e

        logger.info("user_registered", user_id=str(user.id), username=user.username)
        return user

    async def get_user(self, user_id: UUID) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_user_by_email(self, email: str) -> UserResponse:
        user = await self.user_repo.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_user_by_username(self, username: str) -> UserResponse:
        user = await self.user_repo.get_by_username(username)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self,
        user_id: UUID,
        display_name: Optional[str] = None,
        profile_picture_url: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> UserResponse:
        """Change the provided profile fields only; age and verification flags are fixed."""
        request = validate_input(
            UpdateProfileRequest,
            display_name=display_name,
            profile_picture_url=profile_picture_url,
            phone_number=phone_number,
        )

        user = await self.user_repo.update_profile(user_id, request)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def delete_user(self, user_id: UUID) -> None:
        """Delete an account.

        The database removes the user's codes, joints and memberships and
        keeps their messages with the author cleared.
        """
        if not await self.user_repo.delete(user_id):
            raise NotFoundError(f"User {user_id} not found")
        logger.info("user_deleted", user_id=str(user_id))
