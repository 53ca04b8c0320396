"""API request and response models for the membership endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from membership_service.models.member import MemberId


class MemberResponse(BaseModel):
    """Member record as returned by the API."""

    member_id: MemberId = Field(..., description="Member identifier")
    display_name: str = Field(..., description="Display name")
    is_active: bool = Field(..., description="Cached active flag")
    subscription_end: Optional[datetime] = Field(None, description="End of the paid period")


class ActivityResponse(BaseModel):
    """Response for the active flag query."""

    member_id: MemberId = Field(..., description="Member identifier")
    is_active: bool = Field(..., description="False for unknown members")


class RenewSubscriptionRequest(BaseModel):
    """Request to renew a member's subscription."""

    amount: Decimal = Field(..., description="Charged amount to verify")
    duration_days: float = Field(..., description="Days added to the current time")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "499.99",
                "duration_days": 30,
            }
        }


class RenewSubscriptionResponse(BaseModel):
    """Response after a renewal attempt."""

    member_id: MemberId = Field(..., description="Member identifier")
    renewed: bool = Field(..., description="Whether the payment was verified and the renewal committed")
    is_active: bool = Field(..., description="Active flag after the attempt")
    subscription_end: Optional[datetime] = Field(None, description="Subscription end after the attempt")
    message: str = Field(..., description="Result message")

    class Config:
        json_schema_extra = {
            "example": {
                "member_id": 1,
                "renewed": True,
                "is_active": True,
                "subscription_end": "2026-11-15T12:00:00+00:00",
                "message": "Subscription renewed!",
            }
        }


class DeactivateExpiredResponse(BaseModel):
    """Response after an expiration sweep."""

    deactivated: list[MemberId] = Field(default_factory=list, description="Members deactivated by this sweep")
    count: int = Field(..., description="Number of members deactivated")
    message: str = Field(..., description="Result message")


class AdvanceTimeRequest(BaseModel):
    """Request to advance the virtual clock."""

    days: Optional[int] = Field(None, description="Days to advance")
    hours: Optional[int] = Field(None, description="Hours to advance")
    minutes: Optional[int] = Field(None, description="Minutes to advance")

    class Config:
        json_schema_extra = {
            "example": {
                "days": 30,
                "hours": 0,
                "minutes": 0,
            }
        }


class AdvanceTimeResponse(BaseModel):
    """Response after advancing the virtual clock."""

    previous_time: datetime = Field(..., description="Virtual time before the advance")
    current_time: datetime = Field(..., description="Virtual time after the advance")
    expirations_processed: int = Field(..., description="Members deactivated by the follow-up sweep")
    message: str = Field(..., description="Result message")
