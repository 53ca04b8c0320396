"""Member record model.

A member carries a cached activity flag and an optional subscription end.
The two are set independently; the expiration sweep keeps them consistent
with elapsed time.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

MemberId = Union[int, str]


class Member(BaseModel):
    """Subscriber record."""

    member_id: MemberId = Field(..., description="Opaque unique member identifier")
    display_name: str = Field(default="", description="Free-text label, not unique")
    is_active: bool = Field(default=False, description="Whether the member is entitled to service")
    subscription_end: Optional[datetime] = Field(
        None, description="End of the paid period (None if never subscribed)"
    )

    @field_validator("subscription_end")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Treat naive timestamps as UTC so they compare with clock readings."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def set_active(self, is_active: bool, reason: Optional[str] = None) -> None:
        """Change the active flag and log the transition.

        Args:
            is_active: New active flag
            reason: Reason for the change
        """
        from membership_service.state_logger import log_member_activity_change

        old_value = self.is_active
        if old_value != is_active:
            self.is_active = is_active
            log_member_activity_change(
                member_id=self.member_id,
                old_value=old_value,
                new_value=is_active,
                reason=reason,
            )

    def extend_subscription(self, new_end: datetime, reason: str) -> None:
        """Set a new subscription end and log the change.

        Args:
            new_end: New end of the paid period
            reason: Reason for the change
        """
        from membership_service.state_logger import log_subscription_end_change

        old_end = self.subscription_end
        self.subscription_end = new_end
        log_subscription_end_change(
            member_id=self.member_id,
            old_end=old_end,
            new_end=new_end,
            reason=reason,
        )

    def is_expired_at(self, instant: datetime) -> bool:
        """Whether the subscription end has been reached at ``instant``.

        Members without a subscription end never expire.
        """
        return self.subscription_end is not None and self.subscription_end <= instant

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "member_id": 1,
                "display_name": "Anna",
                "is_active": True,
                "subscription_end": "2026-11-15T12:00:00+00:00",
            }
        }
