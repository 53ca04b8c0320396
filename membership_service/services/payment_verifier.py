"""Payment verification.

The lifecycle only needs a yes/no answer for "was this amount authorized for
this member?". SimulatedPaymentVerifier is a local stand-in driven by the
payment section of membership.yaml.
"""

import random
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from membership_service.logging_config import get_logger
from membership_service.models.member import MemberId

logger = get_logger(__name__)


class PaymentVerifier(Protocol):
    """Payment verification capability."""

    def verify(self, member_id: MemberId, amount: Decimal) -> bool:
        ...


class SimulatedPaymentVerifier:
    """Configurable payment verifier for local use.

    Declines:
    - amounts below ``min_amount``
    - members listed in ``declined_members``
    - a random ``failure_rate`` fraction of the remaining payments
    """

    def __init__(
            self,
            failure_rate: float = 0.0,
            min_amount: Decimal = Decimal("0"),
            declined_members: Iterable[MemberId] = (),
            rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0.0 and 1.0")

        self.failure_rate = failure_rate
        self.min_amount = Decimal(min_amount)
        self.declined_members = set(declined_members)
        self._rng = rng or random.Random()

    def verify(self, member_id: MemberId, amount: Decimal) -> bool:
        """Decide whether the payment is authorized."""
        if member_id in self.declined_members:
            reason = "member_declined"
        elif Decimal(amount) < self.min_amount:
            reason = "below_min_amount"
        elif self.failure_rate and self._rng.random() < self.failure_rate:
            reason = "simulated_failure"
        else:
            logger.debug("payment_verified", member_id=member_id, amount=str(amount))
            return True

        logger.info(
            "payment_declined",
            member_id=member_id,
            amount=str(amount),
            reason=reason,
        )
        return False


def build_payment_verifier(config=None) -> SimulatedPaymentVerifier:
    """Create the payment verifier described by configuration.

    Args:
        config: Config instance (defaults to global configuration)
    """
    if config is None:
        from membership_service.config import get_config

        config = get_config()

    payment = config.settings.payment
    return SimulatedPaymentVerifier(
        failure_rate=payment.failure_rate,
        min_amount=payment.min_amount,
        declined_members=payment.declined_members,
    )
