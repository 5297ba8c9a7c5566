"""
Module: booking_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``booking_services``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import booking_kernel (domain, utils, logging).
    MUST NOT import booking_services or booking_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``.  Timestamps are
      explicit parameters supplied by services.
    - Decimal-only arithmetic for amounts.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from booking_engines import evaluate_policy, resolve_corporate_state
    from booking_engines.sla import time_remaining
"""

from booking_engines.corporate_state import program_gate_blocks
from booking_engines.corporate_state import resolve as resolve_corporate_state
from booking_engines.policy import aggregate_outcome
from booking_engines.policy import evaluate as evaluate_policy
from booking_engines.pricing import estimate_amount, format_amount
from booking_engines.receipt import generate_receipt, receipt_hash
from booking_engines.sla import (
    SLASnapshot,
    compute_due_dates,
    format_remaining,
    is_breached,
    snapshot,
    time_remaining,
)
from booking_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "SLASnapshot",
    "aggregate_outcome",
    "compute_due_dates",
    "compute_input_fingerprint",
    "estimate_amount",
    "evaluate_policy",
    "format_amount",
    "format_remaining",
    "generate_receipt",
    "is_breached",
    "program_gate_blocks",
    "receipt_hash",
    "resolve_corporate_state",
    "snapshot",
    "time_remaining",
    "traced_engine",
]
