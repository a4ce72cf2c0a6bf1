from datetime import datetime
from typing import Any, List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from spotfeed.models.api.joint_members import ROLE_CREATOR
from spotfeed.models.api.joints import CreateJointRequest, JointResponse
from spotfeed.models.db.joint_member_model import JointMemberModel
from spotfeed.models.db.joint_model import JointModel
from spotfeed.repositories.base_repository import BaseRepository


class JointRepository(BaseRepository[JointModel, JointResponse]):
    """Repository for joint operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, JointModel)

    async def create_with_creator(
        self, creator_id: UUID, request: CreateJointRequest, expires_at: datetime
    ) -> JointResponse:
        """Insert a joint and its creator membership in a single commit."""
        joint = JointModel(
            id=uuid4(),
            name=request.name,
            description=request.description,
            creator_id=creator_id,
            joint_type=request.joint_type,
            visibility=request.visibility,
            latitude=request.latitude,
            longitude=request.longitude,
            radius=request.radius,
            expires_at=expires_at,
            is_active=True,
        )
        self.db.add(joint)
        self.db.add(
            JointMemberModel(joint_id=joint.id, user_id=creator_id, role=ROLE_CREATOR)
        )
        await self.db.commit()
        await self.db.refresh(joint)
        return self._to_pydantic(joint)

    async def get_for_update(self, joint_id: UUID) -> Optional[JointResponse]:
        """Get a joint and lock its row until the transaction ends."""
        query = (
            select(self.model_class)
            .where(self.model_class.id == joint_id)
            .with_for_update()
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_for_share(self, joint_id: UUID) -> Optional[JointResponse]:
        """Get a joint with a shared row lock.

        Shared holders do not block each other but do block ``get_for_update``.
        """
        query = (
            select(self.model_class)
            .where(self.model_class.id == joint_id)
            .with_for_update(read=True)
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def expire_due(self, now: datetime) -> int:
        """Stage deactivation of active joints whose expiry has passed."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.is_active.is_(True),
                self.model_class.expires_at <= now,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def deactivate(self, joint_id: UUID) -> bool:
        """Stage deactivation of one joint; False if it was already inactive."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.id == joint_id,
                self.model_class.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def set_creator(self, joint_id: UUID, creator_id: UUID) -> None:
        """Stage a change of the owning user."""
        stmt = (
            update(self.model_class)
            .where(self.model_class.id == joint_id)
            .values(creator_id=creator_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def find_live_in_box(
        self, box: Tuple[float, float, float, float], now: datetime
    ) -> List[JointResponse]:
        """Live joints whose coordinates fall inside a lat/lon box."""
        min_lat, max_lat, min_lon, max_lon = box
        query = select(self.model_class).where(
            self.model_class.is_active.is_(True),
            self.model_class.expires_at > now,
            self.model_class.latitude.between(min_lat, max_lat),
            self.model_class.longitude.between(min_lon, max_lon),
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def get_live_for_user(
        self, user_id: UUID, now: datetime
    ) -> List[JointResponse]:
        """Live joints the user is a member of, newest first."""
        query = (
            select(self.model_class)
            .join(
                JointMemberModel,
                JointMemberModel.joint_id == self.model_class.id,
            )
            .where(
                JointMemberModel.user_id == user_id,
                self.model_class.is_active.is_(True),
                self.model_class.expires_at > now,
            )
            .order_by(self.model_class.created_at.desc())
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    def _to_pydantic(self, db_model: Any) -> JointResponse:
        """Convert SQLAlchemy JointModel to Pydantic JointResponse."""
        return JointResponse(
            id=db_model.id,
            name=db_model.name,
            creator_id=db_model.creator_id,
            joint_type=db_model.joint_type,
            visibility=db_model.visibility,
            latitude=db_model.latitude,
            longitude=db_model.longitude,
            radius=db_model.radius,
            created_at=db_model.created_at,
            expires_at=db_model.expires_at,
            description=db_model.description,
            is_active=bool(db_model.is_active),
        )
