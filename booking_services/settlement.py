"""
booking_services.settlement -- Refund settlement boundary.

Responsibility:
    Define the contract of the external payment processor used when a
    cancelled booking is refunded, and drive a single refund attempt.

Architecture position:
    Services layer.  The processor is an opaque collaborator; it may answer
    immediately, answer later (``None`` = no confirmation yet), or fail.

Invariants enforced:
    - A booking reaches Refunded only on an explicit successful result.
    - The processor is only contacted for a booking in Refund processing.
    - Pending or failed settlement raises ``RefundPendingError`` and leaves
      the booking in Refund processing, ready for a retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from booking_kernel.domain.booking import Booking, BookingState
from booking_kernel.exceptions import InvalidTransitionError
from booking_kernel.logging_config import get_logger

if TYPE_CHECKING:
    from booking_services.lifecycle import BookingLifecycleManager

logger = get_logger("services.settlement")

AWAITING_CONFIRMATION = "Awaiting settlement confirmation"


@dataclass(frozen=True)
class SettlementResult:
    """Outcome reported by the payment processor for one refund attempt."""

    succeeded: bool
    reference: str = ""
    failure_reason: str = ""

    @classmethod
    def success(cls, reference: str) -> SettlementResult:
        return cls(succeeded=True, reference=reference)

    @classmethod
    def failure(cls, reason: str) -> SettlementResult:
        return cls(succeeded=False, failure_reason=reason)


class SettlementProcessor(Protocol):
    """Pluggable interface to the payment processor."""

    def request_refund(self, booking: Booking) -> SettlementResult | None:
        """Request or poll a refund.  ``None`` means not confirmed yet."""
        ...


def process_refund(
    manager: BookingLifecycleManager,
    processor: SettlementProcessor,
) -> Booking:
    """Run one refund attempt for the manager's booking.

    Returns:
        The booking, now Refunded.

    Raises:
        RefundPendingError: confirmation has not arrived or the processor
            reported failure.  Safe to retry.
        InvalidTransitionError: the booking is not in Refund processing.
            The processor is not contacted.
    """
    booking = manager.booking
    if booking.state is not BookingState.REFUND_PROCESSING:
        logger.warning(
            "refund_request_rejected",
            extra={"booking_id": booking.id, "from_state": booking.state.value},
        )
        raise InvalidTransitionError(
            booking.state.value, "settle_refund", "no refund in progress",
        )
    return manager.settle_refund(processor.request_refund(booking))
