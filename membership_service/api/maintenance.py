"""Maintenance API for scheduled jobs and local time travel.

Implements:
- POST /maintenance/deactivate-expired - Run the expiration sweep
- POST /maintenance/time/advance - Fast-forward the virtual clock, then sweep
"""

from fastapi import APIRouter, HTTPException

from membership_service.logging_config import get_logger
from membership_service.models import (
    AdvanceTimeRequest,
    AdvanceTimeResponse,
    DeactivateExpiredResponse,
)
from membership_service.services.clock import VirtualClock
from membership_service.services.subscription_lifecycle import (
    ExpirationSweepError,
    get_subscription_lifecycle,
)

logger = get_logger(__name__)
router = APIRouter(tags=["Maintenance"], prefix="/maintenance")


def _sweep_failed(error: ExpirationSweepError) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={
            "error": "Expiration sweep incomplete",
            "message": str(error),
            "deactivated": error.deactivated,
            "failed": {str(member_id): str(cause) for member_id, cause in error.failures.items()},
        },
    )


@router.post(
    "/deactivate-expired",
    response_model=DeactivateExpiredResponse,
    summary="Deactivate expired members",
)
async def deactivate_expired() -> DeactivateExpiredResponse:
    """Deactivate every active member whose subscription end has passed.

    Raises:
        500: Some members could not be persisted or notified
    """
    try:
        deactivated = get_subscription_lifecycle().deactivate_expired()
    except ExpirationSweepError as e:
        raise _sweep_failed(e)

    return DeactivateExpiredResponse(
        deactivated=deactivated,
        count=len(deactivated),
        message=f"Deactivated {len(deactivated)} member(s)",
    )


@router.post(
    "/time/advance",
    response_model=AdvanceTimeResponse,
    summary="Advance virtual time",
)
async def advance_time(request: AdvanceTimeRequest) -> AdvanceTimeResponse:
    """Advance the virtual clock and run the expiration sweep.

    Raises:
        400: Invalid time parameters
        409: Service is not running on a virtual clock
    """
    lifecycle = get_subscription_lifecycle()
    clock = lifecycle.clock
    if not isinstance(clock, VirtualClock):
        raise HTTPException(
            status_code=409,
            detail={
                "error": "Virtual clock disabled",
                "message": "Enable clock.virtual in membership.yaml to advance time",
            },
        )

    logger.info(
        "advance_time_request",
        days=request.days,
        hours=request.hours,
        minutes=request.minutes,
    )

    try:
        result = clock.advance_time(
            days=request.days or 0, hours=request.hours or 0, minutes=request.minutes or 0
        )
    except ValueError as e:
        logger.error("invalid_time_request", error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Invalid request",
                "message": str(e),
            },
        )

    try:
        deactivated = lifecycle.deactivate_expired()
    except ExpirationSweepError as e:
        raise _sweep_failed(e)

    return AdvanceTimeResponse(
        previous_time=result["old_time"],
        current_time=result["new_time"],
        expirations_processed=len(deactivated),
        message=(
            f"Advanced time by {request.days or 0} days, {request.hours or 0} hours, "
            f"{request.minutes or 0} minutes"
        ),
    )
