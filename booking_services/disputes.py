"""
booking_services.disputes -- Dispute automation and manual disputes.

Responsibility:
    Decide when a dispute is opened (automatically on SLA breach, or on
    operator request) and how its status advances.  Returns new ``Dispute``
    values; the lifecycle manager, as sole owner of the booking, applies
    them and appends the timeline events.

Architecture position:
    Services layer.  No clock access: callers pass ``now``.

Invariants enforced:
    - At most one dispute with status Open per booking.  Repeated breach
      signals while one is Open create nothing.
    - Manual disputes need a non-empty reason and a non-terminal booking.
    - Status moves only Open -> In review -> Resolved (``DISPUTE_WORKFLOW``).
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from booking_kernel.domain.booking import Booking, Dispute, DisputeStatus
from booking_kernel.domain.catalog import AttachmentRef
from booking_kernel.domain.workflow import Transition, Workflow
from booking_kernel.exceptions import (
    DisputeAlreadyOpenError,
    DisputeNotFoundError,
    InvalidTransitionError,
    MissingFieldError,
)
from booking_kernel.logging_config import get_logger
from booking_kernel.utils.ids import new_display_id

logger = get_logger("services.disputes")

SLA_BREACH_REASON = "Vendor SLA breached"
SLA_BREACH_NOTE = "Auto-created dispute because vendor SLA was breached."

DISPUTE_WORKFLOW = Workflow(
    name="booking_dispute",
    description="Operator-driven dispute resolution",
    initial_state=DisputeStatus.OPEN.value,
    states=tuple(s.value for s in DisputeStatus),
    transitions=(
        Transition(DisputeStatus.OPEN.value, DisputeStatus.IN_REVIEW.value, action="start_review"),
        Transition(DisputeStatus.IN_REVIEW.value, DisputeStatus.RESOLVED.value, action="resolve"),
    ),
    terminal_states=(DisputeStatus.RESOLVED.value,),
)


class DisputeAutomation:
    """Opens and advances disputes for a single booking.

    Args:
        auto_dispute_enabled: Open a dispute automatically on SLA breach.
    """

    def __init__(self, auto_dispute_enabled: bool = True):
        self.auto_dispute_enabled = auto_dispute_enabled

    def on_sla_breach(self, booking: Booking, now: datetime) -> Dispute | None:
        """React to a breach signal.  Returns the new dispute, if any."""
        if not self.auto_dispute_enabled:
            logger.info(
                "auto_dispute_skipped",
                extra={"booking_id": booking.id, "skip_reason": "disabled"},
            )
            return None
        existing = booking.open_dispute
        if existing is not None:
            logger.info(
                "auto_dispute_skipped",
                extra={
                    "booking_id": booking.id,
                    "skip_reason": "open_dispute_exists",
                    "dispute_id": existing.id,
                },
            )
            return None

        dispute = Dispute(
            id=new_display_id("DSP", now),
            created_at=now,
            reason=SLA_BREACH_REASON,
            note=SLA_BREACH_NOTE,
            status=DisputeStatus.OPEN,
            automatic=True,
        )
        logger.info(
            "dispute_opened",
            extra={"booking_id": booking.id, "dispute_id": dispute.id, "automatic": True},
        )
        return dispute

    def open_dispute(
        self,
        booking: Booking,
        reason: str,
        note: str,
        attachment_ref: AttachmentRef | None,
        now: datetime,
    ) -> Dispute:
        """Manual dispute creation.

        Raises:
            MissingFieldError: ``reason`` is empty or whitespace.
            InvalidTransitionError: the booking is terminal.
            DisputeAlreadyOpenError: another dispute is still Open.
        """
        reason = (reason or "").strip()
        if not reason:
            raise MissingFieldError("reason")
        if booking.is_terminal:
            raise InvalidTransitionError(
                booking.state.value, "open_dispute", "booking is terminal",
            )
        existing = booking.open_dispute
        if existing is not None:
            raise DisputeAlreadyOpenError(booking.id, existing.id)

        dispute = Dispute(
            id=new_display_id("DSP", now),
            created_at=now,
            reason=reason,
            note=(note or "").strip(),
            attachment_ref=attachment_ref,
            status=DisputeStatus.OPEN,
        )
        logger.info(
            "dispute_opened",
            extra={"booking_id": booking.id, "dispute_id": dispute.id, "automatic": False},
        )
        return dispute

    def advance(self, booking: Booking, dispute_id: str, action: str) -> Dispute:
        """Move a dispute along ``DISPUTE_WORKFLOW``.

        Raises:
            DisputeNotFoundError: no dispute with ``dispute_id`` on the booking.
            InvalidTransitionError: ``action`` is not legal from its status.
        """
        dispute = next((d for d in booking.disputes if d.id == dispute_id), None)
        if dispute is None:
            raise DisputeNotFoundError(dispute_id)

        transition = DISPUTE_WORKFLOW.find(dispute.status.value, action)
        if transition is None:
            raise InvalidTransitionError(dispute.status.value, action)

        updated = dataclasses.replace(dispute, status=DisputeStatus(transition.to_state))
        logger.info(
            "dispute_status_changed",
            extra={
                "booking_id": booking.id,
                "dispute_id": dispute_id,
                "from_status": dispute.status.value,
                "to_status": updated.status.value,
            },
        )
        return updated

    def start_review(self, booking: Booking, dispute_id: str) -> Dispute:
        """Open -> In review."""
        return self.advance(booking, dispute_id, "start_review")

    def resolve(self, booking: Booking, dispute_id: str) -> Dispute:
        """In review -> Resolved."""
        return self.advance(booking, dispute_id, "resolve")
