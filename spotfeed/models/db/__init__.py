# SQLAlchemy database models
from .joint_member_model import JointMemberModel
from .joint_model import JointModel
from .message_model import MessageModel
from .otp_code_model import OtpCodeModel
from .user_model import UserModel

__all__ = [
    "JointMemberModel",
    "JointModel",
    "MessageModel",
    "OtpCodeModel",
    "UserModel",
]
