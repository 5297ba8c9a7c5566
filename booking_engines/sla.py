"""
booking_engines.sla -- Vendor SLA tracking.

Responsibility:
    Compute confirmation/delivery deadlines from vendor SLAs, the time left
    against them, and whether a booking has breached.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  ``now`` is always an
    argument; this module never reads the clock and never runs a timer.
    Callers poll ``is_breached`` at whatever cadence they choose.

Invariants enforced:
    - Breach is only possible in Pending confirmation, Confirmed or In
      progress.
    - The confirmation deadline only counts while the booking is still
      waiting for vendor confirmation; the delivery deadline counts in all
      monitored states.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from booking_kernel.domain.booking import (
    SLA_MONITORED_STATES,
    Booking,
    BookingState,
)
from booking_kernel.domain.catalog import Vendor


@dataclass(frozen=True)
class SLASnapshot:
    """Remaining time against both deadlines at a given instant."""

    as_of: datetime
    confirm_remaining: timedelta | None
    delivery_remaining: timedelta | None
    breached: bool


def compute_due_dates(start: datetime, vendor: Vendor) -> tuple[datetime, datetime]:
    """Deadlines for a booking that starts waiting on ``vendor`` at ``start``.

    Returns:
        ``(confirm_due_at, delivery_due_at)``.
    """
    return (
        start + timedelta(minutes=vendor.confirm_sla_minutes),
        start + timedelta(hours=vendor.delivery_sla_hours),
    )


def time_remaining(due_at: datetime, now: datetime) -> timedelta:
    """Time left until ``due_at``.  Zero or negative means overdue."""
    return due_at - now


def is_breached(
    state: BookingState,
    confirm_due_at: datetime | None,
    delivery_due_at: datetime | None,
    now: datetime,
) -> bool:
    """True if a monitored booking has passed a deadline that applies to it."""
    if state not in SLA_MONITORED_STATES:
        return False
    if (
        state is BookingState.PENDING_CONFIRMATION
        and confirm_due_at is not None
        and time_remaining(confirm_due_at, now) <= timedelta(0)
    ):
        return True
    return (
        delivery_due_at is not None
        and time_remaining(delivery_due_at, now) <= timedelta(0)
    )


def snapshot(booking: Booking, now: datetime) -> SLASnapshot:
    """Remaining-time view of a booking, for display and polling."""
    return SLASnapshot(
        as_of=now,
        confirm_remaining=(
            time_remaining(booking.confirm_due_at, now)
            if booking.confirm_due_at is not None else None
        ),
        delivery_remaining=(
            time_remaining(booking.delivery_due_at, now)
            if booking.delivery_due_at is not None else None
        ),
        breached=is_breached(
            booking.state, booking.confirm_due_at, booking.delivery_due_at, now,
        ),
    )


def format_remaining(delta: timedelta) -> str:
    """Short human form: ``Overdue``, ``3d 4h``, ``2h 5m`` or ``12m``."""
    if delta <= timedelta(0):
        return "Overdue"
    minutes = int(delta.total_seconds()) // 60
    hours = minutes // 60
    days = hours // 24
    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"
