import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from spotfeed.database import Base


class JointModel(Base):
    """SQLAlchemy model for joints table."""

    __tablename__ = "joints"
    __table_args__ = (
        CheckConstraint(
            "latitude >= -90 AND latitude <= 90", name="valid_latitude"
        ),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="valid_longitude"
        ),
        Index("idx_joints_creator", "creator_id"),
        Index("idx_joints_expires_at", "expires_at"),
        Index("idx_joints_location", "latitude", "longitude"),
        Index("idx_joints_type", "joint_type"),
        Index(
            "idx_joints_active",
            "is_active",
            postgresql_where=text("is_active = true"),
        ),
        {"comment": "Location-based groups that expire after 6 hours"},
    )

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    name = Column(String(100), nullable=False)
    creator_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    joint_type = Column(
        String(20), nullable=False, default="public", server_default="public"
    )
    visibility = Column(
        String(20), nullable=False, default="visible", server_default="visible"
    )
    latitude = Column(
        Float(precision=53),
        nullable=False,
        comment="Latitude coordinate (-90 to 90)",
    )
    longitude = Column(
        Float(precision=53),
        nullable=False,
        comment="Longitude coordinate (-180 to 180)",
    )
    radius = Column(
        Integer,
        nullable=False,
        default=500,
        server_default=text("500"),
        comment="Visibility radius in meters (default 500m)",
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text, comment="Optional description of the joint")
    is_active = Column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="Whether the joint is currently active",
    )

    # Relationships (cascades are performed by the database)
    members = relationship(
        "JointMemberModel", back_populates="joint", passive_deletes=True
    )
    messages = relationship(
        "MessageModel", back_populates="joint", passive_deletes=True
    )
