import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from spotfeed.database import Base


class MessageModel(Base):
    """SQLAlchemy model for messages table."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_joint", "joint_id"),
        Index("idx_messages_user", "user_id"),
        Index("idx_messages_created", "joint_id", text("created_at DESC")),
        {"comment": "Chat messages within joints"},
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
    # Nulled, not cascaded, when the author is deleted
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    content = Column(Text, nullable=False)
    message_type = Column(
        String(20),
        default="text",
        server_default="text",
        comment="text, image, audio, or video",
    )
    media_url = Column(
        Text, comment="URL to media in R2 storage (for non-text messages)"
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    joint = relationship("JointModel", back_populates="messages")
    user = relationship("UserModel", back_populates="messages")

    # No CHECK constraint on message_type; allowed values and the media_url
    # requirement are enforced by MessageService
    # message_type IN ('text', 'image', 'audio', 'video')
