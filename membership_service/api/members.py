"""Member API: lookups and subscription renewal.

Implements:
- GET /members/{member_id} - Get member
- GET /members/{member_id}/active - Query the cached active flag
- POST /members/{member_id}/renew - Verify payment and renew
"""

from fastapi import APIRouter, HTTPException

from membership_service.logging_config import get_logger
from membership_service.models import (
    ActivityResponse,
    MemberId,
    MemberResponse,
    RenewSubscriptionRequest,
    RenewSubscriptionResponse,
)
from membership_service.repositories.member_store import MemberNotFoundError, get_member_store
from membership_service.services.member_lookup import MemberLookup
from membership_service.services.subscription_lifecycle import (
    RENEWED_MESSAGE,
    get_subscription_lifecycle,
)

logger = get_logger(__name__)
router = APIRouter(tags=["Members"], prefix="/members")


def parse_member_id(raw: str) -> MemberId:
    """Path segments are strings; numeric ids are stored as integers."""
    return int(raw) if raw.isdigit() else raw


def _not_found(member_id: MemberId) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": "Member not found",
            "message": f"Member '{member_id}' does not exist",
        },
    )


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    summary="Get member",
)
async def get_member(member_id: str) -> MemberResponse:
    """Get a member record.

    Raises:
        404: Member not found
    """
    key = parse_member_id(member_id)
    member = MemberLookup(get_member_store()).get_member(key)
    if member is None:
        logger.warning("member_not_found", member_id=key)
        raise _not_found(key)

    return MemberResponse(**member.model_dump())


@router.get(
    "/{member_id}/active",
    response_model=ActivityResponse,
    summary="Check whether a member is active",
)
async def get_member_activity(member_id: str) -> ActivityResponse:
    """Return the cached active flag; unknown members are reported inactive."""
    key = parse_member_id(member_id)
    is_active = MemberLookup(get_member_store()).is_active(key)
    return ActivityResponse(member_id=key, is_active=is_active)


@router.post(
    "/{member_id}/renew",
    response_model=RenewSubscriptionResponse,
    summary="Renew subscription",
)
async def renew_subscription(
        member_id: str, request: RenewSubscriptionRequest
) -> RenewSubscriptionResponse:
    """Verify payment and renew a member's subscription.

    Args:
        member_id: Member identifier
        request: Amount and duration in days

    Returns:
        RenewSubscriptionResponse with the member's state after renewal

    Raises:
        402: Payment declined
        404: Member not found
    """
    key = parse_member_id(member_id)

    logger.info(
        "renew_subscription_request",
        member_id=key,
        amount=str(request.amount),
        duration_days=request.duration_days,
    )

    lifecycle = get_subscription_lifecycle()
    try:
        renewed = lifecycle.renew(key, request.amount, request.duration_days)
    except MemberNotFoundError:
        raise _not_found(key)

    if not renewed:
        raise HTTPException(
            status_code=402,
            detail={
                "error": "Payment declined",
                "message": f"Payment of {request.amount} for member '{key}' was not authorized",
            },
        )

    member = lifecycle.store.get_by_id(key)
    return RenewSubscriptionResponse(
        member_id=key,
        renewed=True,
        is_active=member.is_active,
        subscription_end=member.subscription_end,
        message=RENEWED_MESSAGE,
    )
