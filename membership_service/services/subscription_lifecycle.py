"""Subscription lifecycle: payment-verified renewal and the expiration sweep.

Responsibilities:
- Renew a member after payment verification (activate, extend, persist, notify)
- Deactivate members whose subscription end has passed
- Keep each operation stateless so it can be called from many threads
"""

import threading
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from membership_service.logging_config import get_logger
from membership_service.models.member import Member, MemberId
from membership_service.repositories.member_store import (
    MemberNotFoundError,
    MemberRepository,
)
from membership_service.services.clock import Clock, SystemClock
from membership_service.services.notifier import Notifier
from membership_service.services.payment_verifier import PaymentVerifier

logger = get_logger(__name__)

RENEWED_MESSAGE = "Subscription renewed!"
EXPIRED_MESSAGE = "Membership expired"


class MembershipError(Exception):
    """Base exception for membership lifecycle errors."""

    pass


class ExpirationSweepError(MembershipError):
    """Raised after a sweep in which some members could not be deactivated.

    Every member was still evaluated; ``failures`` maps the member ids that
    failed to the exception raised for them.
    """

    def __init__(self, failures: dict[MemberId, Exception], deactivated: list[MemberId]):
        super().__init__(
            f"Expiration sweep failed for {len(failures)} member(s): "
            + ", ".join(str(member_id) for member_id in failures)
        )
        self.failures = failures
        self.deactivated = deactivated


class SubscriptionLifecycle:
    """Renewal and expiration engine for members.

    Holds no per-operation state; all collaborators are injected.
    """

    def __init__(
            self,
            member_store: MemberRepository,
            payment_verifier: PaymentVerifier,
            notifier: Notifier,
            clock: Optional[Clock] = None,
    ):
        """Initialize the lifecycle engine.

        Args:
            member_store: Member storage (fetch, list, update)
            payment_verifier: Payment authorization check
            notifier: Member notification sink
            clock: Time source (defaults to wall-clock UTC)
        """
        self.store = member_store
        self.payment_verifier = payment_verifier
        self.notifier = notifier
        self.clock = clock or SystemClock()

    def renew(self, member_id: MemberId, amount: Decimal, duration_days: float) -> bool:
        """Renew a member's subscription after verifying payment.

        The new subscription end is counted from the current time, not from
        the previous end. The member is persisted before the notification is sent.

        Args:
            member_id: Member identifier
            amount: Charged amount to verify
            duration_days: Days of service to grant (fractions allowed)

        Returns:
            True if renewed, False if the payment was declined

        Raises:
            MemberNotFoundError: If the member does not exist
        """
        member = self.store.get_by_id(member_id)
        if member is None:
            logger.warning("renewal_member_not_found", member_id=member_id)
            raise MemberNotFoundError(member_id)

        if not self.payment_verifier.verify(member_id, amount):
            logger.info(
                "renewal_payment_declined",
                member_id=member_id,
                amount=str(amount),
            )
            return False

        now = self.clock.now()
        # may overflow for huge durations; computed before the member is touched
        new_end = now + timedelta(days=duration_days)
        previous_active = member.is_active
        previous_end = member.subscription_end

        try:
            member.set_active(True, reason="Subscription renewed")
            member.extend_subscription(new_end, reason=f"Renewal for {duration_days} days")
            self.store.update(member)
        except Exception:
            # not persisted, so the in-memory instance goes back to its stored values
            member.is_active = previous_active
            member.subscription_end = previous_end
            raise

        self.notifier.send(RENEWED_MESSAGE, member_id)

        logger.info(
            "member_renewed",
            member_id=member_id,
            amount=str(amount),
            duration_days=duration_days,
            subscription_end=member.subscription_end.isoformat(),
        )

        return True

    def deactivate_expired(self) -> list[MemberId]:
        """Deactivate every active member whose subscription end has passed.

        Members are evaluated independently against a single reading of the
        clock. Members without a subscription end, with an end in the future,
        or already inactive are left untouched.

        Returns:
            Identifiers of the members deactivated by this sweep

        Raises:
            ExpirationSweepError: If evaluating, persisting or notifying failed for some
                members; raised only after all members were evaluated
        """
        members = self.store.get_all()
        now = self.clock.now()
        deactivated: list[MemberId] = []
        failures: dict[MemberId, Exception] = {}

        for member in members:
            try:
                if not member.is_active or not member.is_expired_at(now):
                    continue

                self._expire_member(member)
                deactivated.append(member.member_id)
            except Exception as e:
                failures[member.member_id] = e
                logger.error(
                    "member_expiration_failed",
                    member_id=member.member_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        logger.info(
            "expiration_sweep_completed",
            evaluated=len(members),
            deactivated=len(deactivated),
            failed=len(failures),
            swept_at=now.isoformat(),
        )

        if failures:
            raise ExpirationSweepError(failures, deactivated)

        return deactivated

    def _expire_member(self, member: Member) -> None:
        member.set_active(False, reason="Subscription end passed")

        try:
            self.store.update(member)
        except Exception:
            member.is_active = True
            raise

        self.notifier.send(EXPIRED_MESSAGE, member.member_id)

        logger.info(
            "member_expired",
            member_id=member.member_id,
            subscription_end=member.subscription_end.isoformat(),
        )


# Global lifecycle instance
_lifecycle_instance: Optional[SubscriptionLifecycle] = None
_lifecycle_lock = threading.Lock()


def get_subscription_lifecycle() -> SubscriptionLifecycle:
    """Get global lifecycle instance wired to the configured collaborators (singleton).

    Returns:
        SubscriptionLifecycle instance
    """
    global _lifecycle_instance
    if _lifecycle_instance is None:
        with _lifecycle_lock:
            if _lifecycle_instance is None:
                from membership_service.repositories.member_store import get_member_store
                from membership_service.services.clock import get_clock
                from membership_service.services.notifier import build_notifier
                from membership_service.services.payment_verifier import build_payment_verifier

                clock = get_clock()
                _lifecycle_instance = SubscriptionLifecycle(
                    member_store=get_member_store(),
                    payment_verifier=build_payment_verifier(),
                    notifier=build_notifier(clock=clock),
                    clock=clock,
                )
    return _lifecycle_instance


def reset_subscription_lifecycle() -> None:
    """Drop the global lifecycle so the next call rewires it."""
    global _lifecycle_instance
    with _lifecycle_lock:
        _lifecycle_instance = None
