# API models for records and validated inputs
from .joint_members import JointMemberResponse
from .joints import (
    CreateJointRequest,
    JointResponse,
    JointSummary,
    JointWithDistance,
    NearbyJointsQuery,
)
from .messages import MessageResponse, PostMessageRequest
from .otp_codes import OtpCodeResponse, VerifyOtpRequest
from .users import RegisterUserRequest, UpdateProfileRequest, UserResponse

__all__ = [
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
]
