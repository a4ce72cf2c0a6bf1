# Export all models
from .api import (
    CreateJointRequest,
    JointMemberResponse,
    JointResponse,
    JointSummary,
    JointWithDistance,
    MessageResponse,
    NearbyJointsQuery,
    OtpCodeResponse,
    PostMessageRequest,
    RegisterUserRequest,
    UpdateProfileRequest,
    UserResponse,
    VerifyOtpRequest,
)
from .db import (
    JointMemberModel,
    JointModel,
    MessageModel,
    OtpCodeModel,
    UserModel,
)

__all__ = [
    # API models
    "CreateJointRequest",
    "JointMemberResponse",
    "JointResponse",
    "JointSummary",
    "JointWithDistance",
    "MessageResponse",
    "NearbyJointsQuery",
    "OtpCodeResponse",
    "PostMessageRequest",
    "RegisterUserRequest",
    "UpdateProfileRequest",
    "UserResponse",
    "VerifyOtpRequest",
    # DB models
    "JointMemberModel",
    "JointModel",
    "MessageModel",
    "OtpCodeModel",
    "UserModel",
]
