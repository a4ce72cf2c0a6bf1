from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spotfeed.models.api.messages import MessageResponse, PostMessageRequest
from spotfeed.models.db.message_model import MessageModel
from spotfeed.repositories.base_repository import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel)

    async def create_message(
        self, joint_id: UUID, user_id: UUID, request: PostMessageRequest
    ) -> MessageResponse:
        """Insert a message into a joint."""
        return await self.create(
            MessageModel(
                joint_id=joint_id,
                user_id=user_id,
                content=request.content,
                message_type=request.message_type,
                media_url=request.media_url,
            )
        )

    async def get_by_joint(
        self,
        joint_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None,
    ) -> List[MessageResponse]:
        """Messages of a joint, newest first."""
        query = select(self.model_class).where(self.model_class.joint_id == joint_id)
        if before is not None:
            query = query.where(self.model_class.created_at < before)
        query = query.order_by(self.model_class.created_at.desc()).limit(limit)

        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    def _to_pydantic(self, db_model: Any) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        return MessageResponse(
            id=db_model.id,
            joint_id=db_model.joint_id,
            user_id=db_model.user_id,
            content=db_model.content,
            message_type=db_model.message_type or "text",
            media_url=db_model.media_url,
            created_at=db_model.created_at,
        )
