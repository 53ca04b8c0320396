"""Member notification message published to Pub/Sub."""

from pydantic import BaseModel, Field

from membership_service.models.member import MemberId


class MemberNotification(BaseModel):
    """Notification addressed to a single member."""

    version: str = Field(default="1.0", description="Message format version")
    member_id: MemberId = Field(..., description="Recipient member")
    message: str = Field(..., description="Notification text")
    event_time: str = Field(..., description="ISO 8601 time the notification was emitted")
