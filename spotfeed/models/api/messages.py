from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

MessageType = Literal["text", "image", "audio", "video"]


class MessageResponse(BaseModel):
    """Response model for message data."""

    id: UUID
    joint_id: UUID
    user_id: Optional[UUID]  # None once the author account is deleted
    content: str
    message_type: str
    media_url: Optional[str]
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class PostMessageRequest(BaseModel):
    """Input model for posting a message to a joint."""

    content: str = Field(..., min_length=1, description="Message content")
    message_type: MessageType = "text"
    media_url: Optional[str] = Field(
        default=None, description="Media location for non-text messages"
    )

    @model_validator(mode="after")
    def media_url_required_for_media(self) -> "PostMessageRequest":
        if self.message_type != "text" and not self.media_url:
            raise ValueError(f"media_url is required for {self.message_type} messages")
        return self
