import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from spotfeed.database import Base


class OtpCodeModel(Base):
    """SQLAlchemy model for otp_codes table."""

    __tablename__ = "otp_codes"
    __table_args__ = (
        Index("idx_otp_user_id", "user_id"),
        Index("idx_otp_expires_at", "expires_at"),
        Index("idx_otp_code", "code"),
        {"comment": "One-time passwords for email verification"},
    )

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("UserModel", back_populates="otp_codes")
