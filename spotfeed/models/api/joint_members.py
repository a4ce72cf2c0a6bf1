from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

ROLE_CREATOR = "creator"
ROLE_MODERATOR = "moderator"
ROLE_MEMBER = "member"

Role = Literal["creator", "moderator", "member"]


class JointMemberResponse(BaseModel):
    """Response model for joint membership data."""

    id: UUID
    joint_id: UUID
    user_id: UUID
    role: Role
    joined_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
