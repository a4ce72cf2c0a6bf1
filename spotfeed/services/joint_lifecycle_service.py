import os
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spotfeed.errors import (
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    SpotFeedError,
    ValidationError,
    translate_integrity_error,
    validate_input,
)
from spotfeed.geo import bounding_box, haversine_distance
from spotfeed.models.api.joint_members import (
    ROLE_CREATOR,
    ROLE_MEMBER,
    ROLE_MODERATOR,
    JointMemberResponse,
)
from spotfeed.models.api.joints import (
    DEFAULT_RADIUS_METERS,
    DEFAULT_TTL,
    CreateJointRequest,
    JointResponse,
    JointSummary,
    JointWithDistance,
    NearbyJointsQuery,
)
from spotfeed.repositories.joint_member_repository import JointMemberRepository
from spotfeed.repositories.joint_repository import JointRepository
from spotfeed.services.joint_state import (
    JOINT_EXPIRED,
    check_state_transition,
    is_live,
    joint_state,
)

logger = structlog.get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def default_ttl() -> timedelta:
    """Joint lifetime used when the creator does not choose one."""
    hours = os.getenv("JOINT_DEFAULT_TTL_HOURS")
    if not hours:
        return DEFAULT_TTL
    return timedelta(hours=float(hours))


class JointLifecycleService:
    """Creates joints, manages membership and answers nearby searches.

    Every multi-row change happens in one transaction. Changes that can
    affect who holds the creator role lock the joint row first.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.joint_repo = JointRepository(db)
        self.member_repo = JointMemberRepository(db)

    async def create_joint(
        self,
        creator_id: UUID,
        name: str,
        latitude: float,
        longitude: float,
        radius: int = DEFAULT_RADIUS_METERS,
        ttl: Optional[timedelta] = None,
        joint_type: str = "public",
        visibility: str = "visible",
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> JointResponse:
        """
        Create a joint owned by `creator_id`:

        1. Validate coordinates, radius, ttl and text fields
        2. Compute expires_at from the ttl
        3. Insert the joint and the creator membership atomically
        """
        request = validate_input(
            CreateJointRequest,
            name=name,
            description=description,
            latitude=latitude,
            longitude=longitude,
            radius=radius,
            ttl=ttl if ttl is not None else default_ttl(),
            joint_type=joint_type,
            visibility=visibility,
        )
        now = now or datetime.now(timezone.utc)
        expires_at = now + request.ttl

        try:
            joint = await self.joint_repo.create_with_creator(
                creator_id, request, expires_at
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(
                e,
                not_found=f"User {creator_id} not found",
                conflict="Joint could not be created",
            ) from e

        logger.info(
            "joint_created",
            joint_id=str(joint.id),
            creator_id=str(creator_id),
            expires_at=joint.expires_at.isoformat(),
        )
        return joint

    async def get_joint(self, joint_id: UUID) -> JointResponse:
        joint = await self.joint_repo.get_by_id(joint_id)
        if not joint:
            raise NotFoundError(f"Joint {joint_id} not found")
        return joint

    async def join_joint(
        self, user_id: UUID, joint_id: UUID, now: Optional[datetime] = None
    ) -> JointMemberResponse:
        """
        Add `user_id` to a live joint as a plain member.

        The joint row is share-locked until the insert commits, so a creator
        leaving at the same time either sees this member or deactivates the
        joint before the liveness check runs.
        """
        now = now or datetime.now(timezone.utc)
        try:
            joint = await self.joint_repo.get_for_share(joint_id)
            if not joint:
                raise NotFoundError(f"Joint {joint_id} not found")
            if not is_live(joint.is_active, joint.expires_at, now):
                raise ExpiredError("Joint has expired or is inactive")

            # No pre-check: the unique (joint_id, user_id) constraint decides races
            membership = await self.member_repo.add_member(
                joint_id, user_id, ROLE_MEMBER
            )
        except SpotFeedError:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(
                e,
                not_found=f"User {user_id} or joint {joint_id} not found",
                conflict="Already a member of this joint",
            ) from e

        logger.info("joint_joined", joint_id=str(joint_id), user_id=str(user_id))
        return membership

    async def leave_joint(self, user_id: UUID, joint_id: UUID) -> None:
        """
        Remove `user_id` from a joint.

        A creator may only leave when nobody else is left, and the joint is
        deactivated when that happens.
        """
        try:
            joint = await self.joint_repo.get_for_update(joint_id)
            if not joint:
                raise NotFoundError(f"Joint {joint_id} not found")

            membership = await self.member_repo.get_membership(joint_id, user_id)
            if not membership:
                raise NotFoundError("You are not a member of this joint")

            deactivated = False
            if membership.role == ROLE_CREATOR:
                others = await self.member_repo.count_others(joint_id, user_id)
                if others > 0:
                    raise ForbiddenError(
                        "Creators cannot leave joints that still have members. "
                        "Transfer the creator role first."
                    )
                deactivated = await self.joint_repo.deactivate(joint_id)

            await self.member_repo.remove(joint_id, user_id)
            await self.db.commit()
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info(
            "joint_left",
            joint_id=str(joint_id),
            user_id=str(user_id),
            joint_deactivated=deactivated,
        )

    async def expire_sweep(self, now: Optional[datetime] = None) -> int:
        """Deactivate every active joint whose expiry has passed.

        The update only touches rows that are still active, so repeated or
        concurrent sweeps converge on the same state.
        """
        now = now or datetime.now(timezone.utc)
        count = await self.joint_repo.expire_due(now)
        await self.db.commit()
        if count:
            logger.info("joints_expired", count=count, now=now.isoformat())
        return count

    async def find_nearby(
        self,
        latitude: float,
        longitude: float,
        max_distance: float,
        now: Optional[datetime] = None,
    ) -> List[JointWithDistance]:
        """
        Live joints around a point:

        1. Pre-filter live joints inside a bounding box in the database
        2. Keep joints whose haversine distance is within
           min(max_distance, joint.radius)
        3. Order by distance, newest first on ties
        """
        query = validate_input(
            NearbyJointsQuery,
            latitude=latitude,
            longitude=longitude,
            max_distance=max_distance,
        )
        now = now or datetime.now(timezone.utc)

        box = bounding_box(query.latitude, query.longitude, query.max_distance)
        candidates = await self.joint_repo.find_live_in_box(box, now)

        matches: List[Tuple[JointResponse, float]] = []
        for joint in candidates:
            if not is_live(joint.is_active, joint.expires_at, now):
                continue
            distance = haversine_distance(
                query.latitude, query.longitude, joint.latitude, joint.longitude
            )
            if distance <= min(query.max_distance, joint.radius):
                matches.append((joint, distance))

        # Two stable sorts: newest first, then by distance
        matches.sort(key=lambda match: match[0].created_at or _OLDEST, reverse=True)
        matches.sort(key=lambda match: match[1])

        counts = await self.member_repo.count_by_joints(
            [joint.id for joint, _ in matches]
        )
        return [
            JointWithDistance(
                joint=joint,
                distance_meters=distance,
                member_count=counts.get(joint.id, 0),
            )
            for joint, distance in matches
        ]

    async def get_active_joints(
        self, user_id: UUID, now: Optional[datetime] = None
    ) -> List[JointSummary]:
        """Live joints the user belongs to, newest first."""
        now = now or datetime.now(timezone.utc)
        joints = await self.joint_repo.get_live_for_user(user_id, now)
        counts = await self.member_repo.count_by_joints([joint.id for joint in joints])
        return [
            JointSummary(joint=joint, member_count=counts.get(joint.id, 0))
            for joint in joints
        ]

    async def list_members(self, joint_id: UUID) -> List[JointMemberResponse]:
        await self.get_joint(joint_id)
        return await self.member_repo.get_by_joint(joint_id)

    async def set_member_role(
        self, actor_id: UUID, joint_id: UUID, user_id: UUID, role: str
    ) -> JointMemberResponse:
        """Promote or demote a member. Only the creator may do this."""
        if role not in (ROLE_MODERATOR, ROLE_MEMBER):
            raise ValidationError(
                f"Role must be '{ROLE_MODERATOR}' or '{ROLE_MEMBER}'"
            )

        try:
            await self._lock_joint(joint_id)
            await self._require_role(actor_id, joint_id, {ROLE_CREATOR})
            if user_id == actor_id:
                raise ForbiddenError(
                    "The creator role can only be handed over by transferring it"
                )

            target = await self.member_repo.get_membership(joint_id, user_id)
            if not target:
                raise NotFoundError(f"User {user_id} is not a member of this joint")

            await self.member_repo.set_role(joint_id, user_id, role)
            await self.db.commit()
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info(
            "joint_role_changed",
            joint_id=str(joint_id),
            user_id=str(user_id),
            role=role,
        )
        return target.model_copy(update={"role": role})

    async def transfer_creator(
        self, actor_id: UUID, joint_id: UUID, new_creator_id: UUID
    ) -> JointResponse:
        """Hand the creator role to another member; the old creator becomes moderator."""
        if new_creator_id == actor_id:
            raise ValidationError("New creator must be a different user")

        try:
            joint = await self._lock_joint(joint_id)
            await self._require_role(actor_id, joint_id, {ROLE_CREATOR})

            target = await self.member_repo.get_membership(joint_id, new_creator_id)
            if not target:
                raise NotFoundError(
                    f"User {new_creator_id} is not a member of this joint"
                )

            await self.member_repo.set_role(joint_id, actor_id, ROLE_MODERATOR)
            await self.member_repo.set_role(joint_id, new_creator_id, ROLE_CREATOR)
            await self.joint_repo.set_creator(joint_id, new_creator_id)
            await self.db.commit()
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info(
            "joint_creator_transferred",
            joint_id=str(joint_id),
            from_user_id=str(actor_id),
            to_user_id=str(new_creator_id),
        )
        return joint.model_copy(update={"creator_id": new_creator_id})

    async def deactivate_joint(
        self, actor_id: UUID, joint_id: UUID, now: Optional[datetime] = None
    ) -> JointResponse:
        """Explicitly end a joint before its expiry (creator or moderator)."""
        now = now or datetime.now(timezone.utc)
        try:
            joint = await self._lock_joint(joint_id)
            await self._require_role(
                actor_id, joint_id, {ROLE_CREATOR, ROLE_MODERATOR}
            )

            current = joint_state(joint.is_active, joint.expires_at, now)
            error = check_state_transition(current, JOINT_EXPIRED)
            if error:
                raise ExpiredError(error)

            await self.joint_repo.deactivate(joint_id)
            await self.db.commit()
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info("joint_deactivated", joint_id=str(joint_id), actor_id=str(actor_id))
        return joint.model_copy(update={"is_active": False})

    async def delete_joint(self, actor_id: UUID, joint_id: UUID) -> None:
        """Delete a joint; memberships and messages go with it."""
        try:
            await self._lock_joint(joint_id)
            await self._require_role(actor_id, joint_id, {ROLE_CREATOR})
            await self.joint_repo.delete(joint_id)
        except SpotFeedError:
            await self.db.rollback()
            raise

        logger.info("joint_deleted", joint_id=str(joint_id), actor_id=str(actor_id))

    async def _lock_joint(self, joint_id: UUID) -> JointResponse:
        joint = await self.joint_repo.get_for_update(joint_id)
        if not joint:
            raise NotFoundError(f"Joint {joint_id} not found")
        return joint

    async def _require_role(
        self, user_id: UUID, joint_id: UUID, roles: set
    ) -> JointMemberResponse:
        membership = await self.member_repo.get_membership(joint_id, user_id)
        if not membership or membership.role not in roles:
            raise ForbiddenError("You are not allowed to manage this joint")
        return membership
