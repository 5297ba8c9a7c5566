"""
booking_engines.receipt -- Point-in-time booking receipts.

Responsibility:
    Build the immutable ``Receipt`` captured when a booking enters Pending
    confirmation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The caller supplies the
    receipt id and timestamp.

Invariants enforced:
    - Purpose and cost center are recorded only for corporate payments.
    - ``content_hash`` is a SHA-256 over every snapshot field, so any later
      tampering with a stored receipt is detectable.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from booking_kernel.domain.booking import Booking, Receipt
from booking_kernel.domain.catalog import ServiceDefinition, Vendor
from booking_kernel.domain.policy import PolicyDecision
from booking_kernel.utils.hashing import hash_payload


def receipt_hash(receipt: Receipt) -> str:
    """Hash of every receipt field except ``content_hash`` itself."""
    payload = {
        f.name: getattr(receipt, f.name)
        for f in dataclasses.fields(receipt)
        if f.name != "content_hash"
    }
    return hash_payload(payload)


def generate_receipt(
    *,
    receipt_id: str,
    booking: Booking,
    service: ServiceDefinition,
    vendor: Vendor,
    decision: PolicyDecision,
    org_name: str,
    issued_at: datetime,
) -> Receipt:
    """Snapshot ``booking`` and the decision that admitted it.

    Args:
        receipt_id: Display id for the receipt.
        booking: The booking, already in its new state.
        service: Catalog record for ``booking.service_id``.
        vendor: Catalog record for ``booking.vendor_id``.
        decision: Policy decision in force at the transition.
        org_name: Organization shown on the receipt.
        issued_at: Timestamp of the transition.
    """
    corporate = booking.payment_method.is_corporate
    receipt = Receipt(
        receipt_id=receipt_id,
        booking_id=booking.id,
        org_name=org_name,
        module=service.module,
        service_title=service.title,
        vendor_name=vendor.name,
        created_at=issued_at,
        scheduled_at=booking.scheduled_at,
        beneficiary=booking.beneficiary.descriptor,
        payment_method=booking.payment_method,
        corporate=corporate,
        purpose=booking.purpose if corporate else None,
        cost_center=booking.cost_center if corporate else None,
        attachment_count=booking.attachment_count,
        amount=booking.amount,
        currency=booking.currency,
        status=booking.state,
        decision_outcome=decision.outcome,
    )
    return dataclasses.replace(receipt, content_hash=receipt_hash(receipt))
