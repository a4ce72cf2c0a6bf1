import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from spotfeed.database import Base


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_email", "email"),
        Index("idx_users_username", "username"),
        {"comment": "User accounts for Spot Feed"},
    )

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_pic_url = Column(Text)
    phone = Column(String(20))
    is_18_plus = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Age verification - user confirmed they are 18+",
    )
    is_verified = Column(
        Boolean,
        default=False,
        server_default=text("false"),
        comment="Email verification status via OTP",
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
    display_name = Column(String(100), comment="User display name (optional)")
    profile_picture_url = Column(Text, comment="URL to user profile picture")
    phone_number = Column(String(20), comment="User phone number (optional)")

    # Relationships (rows are removed or nulled by the database)
    otp_codes = relationship(
        "OtpCodeModel", back_populates="user", passive_deletes=True
    )
    memberships = relationship(
        "JointMemberModel", back_populates="user", passive_deletes=True
    )
    messages = relationship("MessageModel", back_populates="user", passive_deletes=True)
