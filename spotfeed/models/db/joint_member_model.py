import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from spotfeed.database import Base


class JointMemberModel(Base):
    """SQLAlchemy model for joint_members table."""

    __tablename__ = "joint_members"
    __table_args__ = (
        UniqueConstraint("joint_id", "user_id"),
        Index("idx_joint_members_joint", "joint_id"),
        Index("idx_joint_members_user", "user_id"),
        Index("idx_joint_members_role", "joint_id", "role"),
        {"comment": "Tracks which users are in which joints"},
    )

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    joint_id = Column(
        UUID(as_uuid=True),
        ForeignKey("joints.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role = Column(
        String(20),
        nullable=False,
        default="member",
        server_default="member",
        comment="creator, moderator, or member",
    )
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    joint = relationship("JointModel", back_populates="members")
    user = relationship("UserModel", back_populates="memberships")

    # No CHECK constraint on role; allowed values are enforced by the services
    # role IN ('creator', 'moderator', 'member')
