from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spotfeed.errors import (
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    translate_integrity_error,
    validate_input,
)
from spotfeed.models.api.messages import MessageResponse, PostMessageRequest
from spotfeed.repositories.joint_member_repository import JointMemberRepository
from spotfeed.repositories.joint_repository import JointRepository
from spotfeed.repositories.message_repository import MessageRepository
from spotfeed.services.joint_state import is_live

logger = structlog.get_logger(__name__)


class MessageService:
    """Service for posting and reading chat messages inside joints."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.joint_repo = JointRepository(db)
        self.member_repo = JointMemberRepository(db)

    async def post_message(
        self,
        joint_id: UUID,
        user_id: UUID,
        content: str,
        message_type: str = "text",
        media_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> MessageResponse:
        """
        Main business logic for posting a message:
        1. Validate content, type and the media_url requirement
        2. Verify the joint exists and is live
        3. Verify the author is a member of the joint
        4. Save message to database
        """
        request = validate_input(
            PostMessageRequest,
            content=content,
            message_type=message_type,
            media_url=media_url,
        )
        now = now or datetime.now(timezone.utc)

        joint = await self.joint_repo.get_by_id(joint_id)
        if not joint:
            raise NotFoundError(f"Joint {joint_id} not found")
        if not is_live(joint.is_active, joint.expires_at, now):
            raise ExpiredError("Joint has expired or is inactive")

        membership = await self.member_repo.get_membership(joint_id, user_id)
        if not membership:
            raise ForbiddenError("Only members can post in this joint")

        try:
            message = await self.message_repo.create_message(
                joint_id, user_id, request
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(
                e,
                not_found=f"Joint {joint_id} not found",
                conflict="Message could not be stored",
            ) from e

        logger.info(
            "message_posted",
            message_id=str(message.id),
            joint_id=str(joint_id),
            message_type=message.message_type,
        )
        return message

    async def list_messages(
        self,
        joint_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None,
    ) -> List[MessageResponse]:
        """Messages of a joint, newest first, paged with `before`."""
        if limit <= 0 or limit > 1000:
            raise ValidationError("Limit must be between 1 and 1000")

        joint = await self.joint_repo.get_by_id(joint_id)
        if not joint:
            raise NotFoundError(f"Joint {joint_id} not found")

        return await self.message_repo.get_by_joint(joint_id, limit=limit, before=before)

    async def get_message(self, message_id: UUID) -> MessageResponse:
        message = await self.message_repo.get_by_id(message_id)
        if not message:
            raise NotFoundError(f"Message {message_id} not found")
        return message
