# Repository classes for database operations
from .base_repository import BaseRepository
from .joint_member_repository import JointMemberRepository
from .joint_repository import JointRepository
from .message_repository import MessageRepository
from .otp_code_repository import OtpCodeRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "JointMemberRepository",
    "JointRepository",
    "MessageRepository",
    "OtpCodeRepository",
    "UserRepository",
]
