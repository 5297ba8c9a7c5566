"""
booking_engines.corporate_state -- CorporatePay display state resolution.

Responsibility:
    Project the policy outcome and program status onto the three-valued
    display state shown next to the CorporatePay option.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Never returns Available for CorporatePay while the decision is
      Blocked or program gating blocks.
    - ``program_gate_blocks`` is the single definition of program gating;
      the policy evaluator uses the same function.
"""

from __future__ import annotations

from booking_kernel.domain.policy import (
    HARD_BLOCKING_STATUSES,
    CorporateProgramStatus,
    CorporateState,
    Outcome,
    PaymentMethod,
    PolicyDecision,
)


def program_gate_blocks(status: CorporateProgramStatus, grace_active: bool) -> bool:
    """True when the program itself forbids CorporatePay."""
    if status in HARD_BLOCKING_STATUSES:
        return True
    return status is CorporateProgramStatus.BILLING_DELINQUENCY and not grace_active


def resolve(
    payment_method: PaymentMethod,
    program_status: CorporateProgramStatus,
    grace_active: bool,
    decision: PolicyDecision,
) -> CorporateState:
    """Resolve the CorporatePay display state."""
    if not payment_method.is_corporate:
        return CorporateState.AVAILABLE
    if program_gate_blocks(program_status, grace_active):
        return CorporateState.NOT_AVAILABLE
    if decision.outcome is Outcome.BLOCKED:
        return CorporateState.NOT_AVAILABLE
    if decision.outcome is Outcome.APPROVAL_REQUIRED:
        return CorporateState.REQUIRES_APPROVAL
    return CorporateState.AVAILABLE
