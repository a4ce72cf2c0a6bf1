from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spotfeed.models.api.joint_members import JointMemberResponse
from spotfeed.models.db.joint_member_model import JointMemberModel
from spotfeed.repositories.base_repository import BaseRepository


class JointMemberRepository(BaseRepository[JointMemberModel, JointMemberResponse]):
    """Repository for joint membership operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, JointMemberModel)

    async def add_member(
        self, joint_id: UUID, user_id: UUID, role: str
    ) -> JointMemberResponse:
        """Insert a membership row. The (joint_id, user_id) constraint decides races."""
        return await self.create(
            JointMemberModel(joint_id=joint_id, user_id=user_id, role=role)
        )

    async def get_membership(
        self, joint_id: UUID, user_id: UUID
    ) -> Optional[JointMemberResponse]:
        """Get the membership of a user in a joint."""
        query = select(self.model_class).where(
            self.model_class.joint_id == joint_id,
            self.model_class.user_id == user_id,
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_by_joint(self, joint_id: UUID) -> List[JointMemberResponse]:
        """All memberships of a joint in join order."""
        query = (
            select(self.model_class)
            .where(self.model_class.joint_id == joint_id)
            .order_by(self.model_class.joined_at)
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def count_by_joints(self, joint_ids: Sequence[UUID]) -> Dict[UUID, int]:
        """Member counts keyed by joint ID; joints without rows are omitted."""
        if not joint_ids:
            return {}
        query = (
            select(self.model_class.joint_id, func.count(self.model_class.id))
            .where(self.model_class.joint_id.in_(list(joint_ids)))
            .group_by(self.model_class.joint_id)
        )
        result = await self.db.execute(query)
        return {joint_id: count for joint_id, count in result.all()}

    async def count_others(self, joint_id: UUID, user_id: UUID) -> int:
        """Number of members of a joint other than the given user."""
        query = select(func.count(self.model_class.id)).where(
            self.model_class.joint_id == joint_id,
            self.model_class.user_id != user_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def remove(self, joint_id: UUID, user_id: UUID) -> bool:
        """Stage removal of a membership."""
        stmt = delete(self.model_class).where(
            self.model_class.joint_id == joint_id,
            self.model_class.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def set_role(self, joint_id: UUID, user_id: UUID, role: str) -> bool:
        """Stage a role change for a membership."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.joint_id == joint_id,
                self.model_class.user_id == user_id,
            )
            .values(role=role)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    def _to_pydantic(self, db_model: Any) -> JointMemberResponse:
        """Convert SQLAlchemy JointMemberModel to Pydantic JointMemberResponse."""
        return JointMemberResponse(
            id=db_model.id,
            joint_id=db_model.joint_id,
            user_id=db_model.user_id,
            role=db_model.role,
            joined_at=db_model.joined_at,
        )
