"""
Booking domain types (``booking_kernel.domain.booking``).

Responsibility
--------------
Pure value objects for the booking aggregate: lifecycle states, the
append-only timeline, disputes and the immutable receipt snapshot.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``Booking`` is frozen.  The lifecycle manager produces a new instance per
  transition, so a failed transition can never leave a half-applied booking.
* ``timeline`` is a tuple that only ever grows (append-only).
* ``Receipt`` is frozen and carries the status at confirmation time; it is
  never rewritten when the booking moves on.
* At most one dispute in ``disputes`` has status Open.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from booking_kernel.domain.catalog import (
    AttachmentRef,
    Beneficiary,
    Role,
    ServiceModule,
)
from booking_kernel.domain.policy import Outcome, PaymentMethod


class BookingState(str, Enum):
    """Booking lifecycle states."""

    DRAFT = "Draft"
    PENDING_APPROVAL = "Pending approval"
    PENDING_CONFIRMATION = "Pending confirmation"
    CONFIRMED = "Confirmed"
    IN_PROGRESS = "In progress"
    COMPLETED = "Completed"
    NEEDS_CHANGES = "Needs changes"
    CANCELLED = "Cancelled"
    REFUND_PROCESSING = "Refund processing"
    REFUNDED = "Refunded"
    SLA_BREACHED = "SLA breached"


TERMINAL_BOOKING_STATES: frozenset[BookingState] = frozenset({
    BookingState.COMPLETED,
    BookingState.REFUNDED,
})

# States in which vendor SLAs are being monitored.
SLA_MONITORED_STATES: frozenset[BookingState] = frozenset({
    BookingState.PENDING_CONFIRMATION,
    BookingState.CONFIRMED,
    BookingState.IN_PROGRESS,
})


class Actor(str, Enum):
    """Who caused a timeline event."""

    REQUESTER = "You"
    APPROVER = "Approver"
    VENDOR = "Vendor"
    SYSTEM = "System"


@dataclass(frozen=True)
class TimelineEvent:
    id: UUID
    timestamp: datetime
    title: str
    detail: str
    actor: str


class DisputeStatus(str, Enum):
    OPEN = "Open"
    IN_REVIEW = "In review"
    RESOLVED = "Resolved"


@dataclass(frozen=True)
class Dispute:
    id: str
    created_at: datetime
    reason: str
    note: str = ""
    attachment_ref: AttachmentRef | None = None
    status: DisputeStatus = DisputeStatus.OPEN
    automatic: bool = False


@dataclass(frozen=True)
class Receipt:
    """Point-in-time snapshot taken when a booking enters Pending confirmation.

    ``status`` is the booking state at that instant.  Presentation layers
    that need the live status read the booking, not the receipt.
    """

    receipt_id: str
    booking_id: str
    org_name: str
    module: ServiceModule
    service_title: str
    vendor_name: str
    created_at: datetime
    scheduled_at: datetime | None
    beneficiary: str
    payment_method: PaymentMethod
    corporate: bool
    purpose: str | None
    cost_center: str | None
    attachment_count: int
    amount: Decimal
    currency: str
    status: BookingState
    decision_outcome: Outcome
    content_hash: str = ""


@dataclass(frozen=True)
class Booking:
    """The booking aggregate.

    Owned exclusively by ``BookingLifecycleManager``; every other component
    receives it read-only.  ``confirm_due_at`` and ``delivery_due_at`` stay
    ``None`` until the booking first enters Pending confirmation and are
    never recomputed afterwards.
    """

    id: str
    state: BookingState
    created_at: datetime
    service_id: str
    vendor_id: str
    amount: Decimal
    currency: str
    payment_method: PaymentMethod
    beneficiary: Beneficiary
    role: Role = Role.EMPLOYEE
    cost_center: str = ""
    purpose: str = ""
    notes: str = ""
    attachment_refs: tuple[AttachmentRef, ...] = ()
    scheduled_at: datetime | None = None
    confirm_due_at: datetime | None = None
    delivery_due_at: datetime | None = None
    approval_request_id: str | None = None
    timeline: tuple[TimelineEvent, ...] = ()
    disputes: tuple[Dispute, ...] = ()
    receipt: Receipt | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_BOOKING_STATES

    @property
    def attachment_count(self) -> int:
        return len(self.attachment_refs)

    @property
    def open_dispute(self) -> Dispute | None:
        for d in self.disputes:
            if d.status is DisputeStatus.OPEN:
                return d
        return None
