"""Service configuration models.

Models from membership.yaml configuration.
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from membership_service.models.member import Member, MemberId


class PaymentConfig(BaseModel):
    """Simulated payment verifier settings."""

    failure_rate: float = Field(default=0.0, ge=0.0, le=1.0, description="Random decline rate (0.0-1.0)")
    min_amount: Decimal = Field(default=Decimal("0"), description="Amounts below this are declined")
    declined_members: list[MemberId] = Field(
        default_factory=list, description="Members whose payments are always declined"
    )


class PubSubConfig(BaseModel):
    """Pub/Sub notification settings."""

    project_id: str = Field(..., description="GCP project ID")
    topic: str = Field(..., description="Pub/Sub topic name")
    publish_timeout: float = Field(default=5.0, description="Seconds to wait for a publish to complete")


class NotificationConfig(BaseModel):
    """Notification sink settings."""

    backend: Literal["log", "pubsub"] = Field(default="log", description="Notification backend")
    pubsub: Optional[PubSubConfig] = Field(None, description="Pub/Sub settings (pubsub backend only)")

    class Config:
        json_schema_extra = {
            "example": {
                "backend": "pubsub",
                "pubsub": {"project_id": "membership-local", "topic": "member-notifications"},
            }
        }


class ClockConfig(BaseModel):
    """Time source settings."""

    virtual: bool = Field(default=False, description="Use a controllable virtual clock")


class MembershipServiceConfig(BaseModel):
    """Complete membership.yaml configuration."""

    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)
    members: list[Member] = Field(default_factory=list, description="Members seeded into the local store")
