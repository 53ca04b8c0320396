"""Pydantic models for members, configuration, events and the API."""

# Member record
from .member import Member, MemberId

# Configuration models
from .settings import (
    ClockConfig,
    MembershipServiceConfig,
    NotificationConfig,
    PaymentConfig,
    PubSubConfig,
)

# Notification messages
from .events import MemberNotification

# API models
from .api import (
    ActivityResponse,
    AdvanceTimeRequest,
    AdvanceTimeResponse,
    DeactivateExpiredResponse,
    MemberResponse,
    RenewSubscriptionRequest,
    RenewSubscriptionResponse,
)

__all__ = [
    # Member
    "Member",
    "MemberId",
    # Configuration
    "ClockConfig",
    "MembershipServiceConfig",
    "NotificationConfig",
    "PaymentConfig",
    "PubSubConfig",
    # Events
    "MemberNotification",
    # API
    "ActivityResponse",
    "AdvanceTimeRequest",
    "AdvanceTimeResponse",
    "DeactivateExpiredResponse",
    "MemberResponse",
    "RenewSubscriptionRequest",
    "RenewSubscriptionResponse",
]
