from datetime import datetime, timedelta
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RADIUS_METERS = 500
DEFAULT_TTL = timedelta(hours=6)
MAX_SEARCH_DISTANCE_METERS = 10000


class JointResponse(BaseModel):
    """Response model for joint data."""

    id: UUID
    name: str
    creator_id: UUID
    joint_type: str
    visibility: str
    latitude: float
    longitude: float
    radius: int
    created_at: Optional[datetime]
    expires_at: datetime
    description: Optional[str]
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class JointSummary(BaseModel):
    """A joint together with its current member count."""

    joint: JointResponse
    member_count: int


class JointWithDistance(JointSummary):
    """A joint together with its distance from a query point."""

    distance_meters: float


class CreateJointRequest(BaseModel):
    """Input model for creating a joint."""

    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius: int = Field(default=DEFAULT_RADIUS_METERS, gt=0)
    ttl: timedelta = Field(default=DEFAULT_TTL, description="Lifetime of the joint")
    joint_type: Literal["public", "private"] = "public"
    visibility: Literal["visible", "hidden"] = "visible"

    @field_validator("ttl")
    @classmethod
    def ttl_must_be_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("ttl must be positive")
        return value


class NearbyJointsQuery(BaseModel):
    """Input model for a nearby search."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    max_distance: float = Field(..., gt=0, le=MAX_SEARCH_DISTANCE_METERS)
