"""State change logging for member records.

Tracks activity flag and subscription end transitions with before/after
values for debugging and auditing.
"""

from datetime import datetime
from typing import Any, Optional

from membership_service.logging_config import get_logger

logger = get_logger(__name__)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def log_member_activity_change(
    member_id: Any,
    old_value: bool,
    new_value: bool,
    reason: Optional[str] = None,
    **extra_context: Any,
) -> None:
    """Log a change of a member's active flag.

    Args:
        member_id: Member identifier
        old_value: Previous active flag
        new_value: New active flag
        reason: Reason for the change (renewal, expiration, ...)
        **extra_context: Additional context
    """
    logger.info(
        "member_activity_changed",
        member_id=member_id,
        old_value=old_value,
        new_value=new_value,
        reason=reason,
        **extra_context,
    )


def log_subscription_end_change(
    member_id: Any,
    old_end: Optional[datetime],
    new_end: datetime,
    reason: str,
    **extra_context: Any,
) -> None:
    """Log a change of a member's subscription end.

    Args:
        member_id: Member identifier
        old_end: Previous subscription end (None if never subscribed)
        new_end: New subscription end
        reason: Reason for change
        **extra_context: Additional context
    """
    logger.info(
        "subscription_end_changed",
        member_id=member_id,
        old_end=_isoformat(old_end),
        new_end=_isoformat(new_end),
        reason=reason,
        **extra_context,
    )
