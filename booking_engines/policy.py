"""
Corporate Payment Policy Engine (``booking_engines.policy``).

Responsibility
--------------
Decide whether a service booking is authorized under organizational
payment policy.  Produces a ``PolicyDecision`` carrying the outcome, the
ordered reasons behind it, alternatives the user can take and advisory
coaching tips.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
Safe to call on every field edit and from any number of threads.

Invariants enforced
-------------------
* Personal payment methods are always Allowed; no further checks run.
* Program gating short-circuits: a blocked program yields Blocked with a
  single Critical PROGRAM reason and only the "pay personally" alternative.
* Any Critical reason -> Blocked; else any Warning -> Approval required;
  else Allowed.
* Coaching tips never influence the outcome.
* Deterministic: same inputs = structurally equal decision.

Failure modes
-------------
* Returns reasons (not exceptions) for policy violations.
* Raises ``ValueError`` only for malformed inputs (via ``PolicyInputs``).
"""

from __future__ import annotations

from booking_engines.corporate_state import program_gate_blocks
from booking_engines.pricing import format_amount
from booking_engines.tracer import traced_engine
from booking_kernel.domain.catalog import (
    BeneficiaryType,
    Role,
    ServiceModule,
    VendorStatus,
)
from booking_kernel.domain.policy import (
    Alternative,
    CoachTip,
    CorporateProgramStatus,
    Outcome,
    PolicyDecision,
    PolicyInputs,
    Reason,
    ReasonCode,
    Severity,
)

ALT_PAY_PERSONALLY = Alternative(
    id="alt-pay",
    title="Pay personally",
    description="Proceed immediately using personal payment.",
    expected_outcome=Outcome.ALLOWED,
)

ALT_ADD_PURPOSE = Alternative(
    id="alt-purpose",
    title="Add purpose",
    description="Select a purpose tag to proceed.",
    expected_outcome=Outcome.ALLOWED,
)

ALT_SELECT_COST_CENTER = Alternative(
    id="alt-cc",
    title="Select cost center",
    description="Choose a cost center for billing allocation.",
    expected_outcome=Outcome.ALLOWED,
)

_PROGRAM_BLOCK_DETAIL: dict[CorporateProgramStatus, str] = {
    CorporateProgramStatus.NOT_LINKED: (
        "CorporatePay is only available when you are linked to an organization."
    ),
    CorporateProgramStatus.NOT_ELIGIBLE: (
        "Your role or group is not eligible under policy for this module."
    ),
    CorporateProgramStatus.DEPOSIT_DEPLETED: (
        "Prepaid deposit is depleted. CorporatePay stops until admin tops up."
    ),
    CorporateProgramStatus.CREDIT_LIMIT_EXCEEDED: (
        "Corporate credit limit exceeded. CorporatePay is paused."
    ),
    CorporateProgramStatus.BILLING_DELINQUENCY: (
        "CorporatePay is suspended due to delinquency."
    ),
}


def _personal_payment_decision() -> PolicyDecision:
    return PolicyDecision(
        outcome=Outcome.ALLOWED,
        reasons=(
            Reason(
                code=ReasonCode.OK,
                title="Personal payment selected",
                detail="Corporate policy checks do not block personal payments.",
                severity=Severity.INFO,
            ),
        ),
        coach=(
            CoachTip(
                id="coach-corp",
                title="Use CorporatePay for audit-ready receipts",
                description=(
                    "CorporatePay receipts include purpose, cost center, "
                    "and booking metadata."
                ),
            ),
        ),
    )


def _program_blocked_decision(status: CorporateProgramStatus) -> PolicyDecision:
    return PolicyDecision(
        outcome=Outcome.BLOCKED,
        reasons=(
            Reason(
                code=ReasonCode.PROGRAM,
                title=status.value,
                detail=_PROGRAM_BLOCK_DETAIL[status],
                severity=Severity.CRITICAL,
            ),
        ),
        alternatives=(ALT_PAY_PERSONALLY,),
    )


def collect_reasons(inputs: PolicyInputs) -> list[Reason]:
    """Independent policy checks for a CorporatePay booking past program gating.

    Order is stable: program warning, vendor, fields, attachments, amount.
    """
    service = inputs.service
    reasons: list[Reason] = []

    if inputs.program_status is CorporateProgramStatus.BILLING_DELINQUENCY:
        reasons.append(Reason(
            code=ReasonCode.PROGRAM,
            title="Grace window active",
            detail="Billing is past due but grace window is active.",
            severity=Severity.WARNING,
        ))

    if inputs.vendor.status is VendorStatus.RESTRICTED:
        reasons.append(Reason(
            code=ReasonCode.VENDOR,
            title="Vendor restricted",
            detail="This vendor requires approval for corporate bookings.",
            severity=Severity.WARNING,
        ))

    if not inputs.cost_center.strip():
        reasons.append(Reason(
            code=ReasonCode.FIELDS,
            title="Cost center required",
            detail="Cost center is required for corporate billing allocation.",
            severity=Severity.CRITICAL,
        ))

    if service.purpose_required and not inputs.purpose.strip():
        reasons.append(Reason(
            code=ReasonCode.FIELDS,
            title="Purpose required",
            detail="Purpose tag is required by policy for this service.",
            severity=Severity.CRITICAL,
        ))

    if service.notes_required and len(inputs.notes.strip()) < inputs.notes_min_length:
        reasons.append(Reason(
            code=ReasonCode.FIELDS,
            title="Notes required",
            detail=(
                f"Notes of at least {inputs.notes_min_length} characters "
                f"are required for this service."
            ),
            severity=Severity.CRITICAL,
        ))

    if service.required_attachments and inputs.attachment_count == 0:
        reasons.append(Reason(
            code=ReasonCode.ATTACH,
            title="Attachment required",
            detail=f"Upload: {', '.join(service.required_attachments)}.",
            severity=Severity.CRITICAL,
        ))

    if inputs.amount > service.approval_threshold:
        threshold = format_amount(service.approval_threshold, inputs.currency)
        reasons.append(Reason(
            code=ReasonCode.AMOUNT,
            title="Approval required",
            detail=f"Amount above {threshold} requires approval.",
            severity=Severity.WARNING,
        ))

    return reasons


def coaching_tips(inputs: PolicyInputs) -> tuple[CoachTip, ...]:
    """Advisory hints for a CorporatePay booking.  Never affect the outcome."""
    tips: list[CoachTip] = []

    if inputs.vendor.status is VendorStatus.RESTRICTED:
        tips.append(CoachTip(
            id="coach-vendor",
            title="Prefer approved vendors",
            description="Approved or preferred vendors reduce approval friction.",
        ))

    beneficiary = inputs.beneficiary
    if (
        inputs.role is Role.COORDINATOR
        and beneficiary is not None
        and beneficiary.type is not BeneficiaryType.SELF
    ):
        tips.append(CoachTip(
            id="coach-bookfor",
            title="Book for others is audited",
            description=(
                "Add a clear purpose and attach supporting documents "
                "to reduce rework."
            ),
        ))

    if inputs.service.module is ServiceModule.TRAVEL:
        tips.append(CoachTip(
            id="coach-travel",
            title="Use policy-safe templates",
            description=(
                "Travel bookings are smoother when itinerary or "
                "invitation is attached."
            ),
        ))
    elif inputs.service.module is ServiceModule.MEDICAL:
        tips.append(CoachTip(
            id="coach-medical",
            title="Attach supporting documents",
            description=(
                "Medical bookings clear faster with a referral or "
                "doctor letter attached."
            ),
        ))

    return tuple(tips)


def _alternatives(inputs: PolicyInputs) -> tuple[Alternative, ...]:
    alternatives: list[Alternative] = []
    if inputs.service.purpose_required and not inputs.purpose.strip():
        alternatives.append(ALT_ADD_PURPOSE)
    if not inputs.cost_center.strip():
        alternatives.append(ALT_SELECT_COST_CENTER)
    alternatives.append(ALT_PAY_PERSONALLY)
    return tuple(alternatives)


def aggregate_outcome(reasons: list[Reason] | tuple[Reason, ...]) -> Outcome:
    """Critical dominates Warning dominates Info."""
    if any(r.severity is Severity.CRITICAL for r in reasons):
        return Outcome.BLOCKED
    if any(r.severity is Severity.WARNING for r in reasons):
        return Outcome.APPROVAL_REQUIRED
    return Outcome.ALLOWED


@traced_engine("policy", "1.0", fingerprint_fields=("inputs",))
def evaluate(inputs: PolicyInputs) -> PolicyDecision:
    """Evaluate corporate payment policy for a booking.

    Args:
        inputs: Payment method, program status, catalog records and the
            fields the user has filled in so far.

    Returns:
        PolicyDecision with outcome, reasons, alternatives and coach tips.
    """
    if not inputs.payment_method.is_corporate:
        return _personal_payment_decision()

    if program_gate_blocks(inputs.program_status, inputs.grace_active):
        return _program_blocked_decision(inputs.program_status)

    reasons = collect_reasons(inputs)
    outcome = aggregate_outcome(reasons)

    if not reasons:
        reasons.append(Reason(
            code=ReasonCode.OK,
            title="Within policy",
            detail="Service booking passes current policy checks.",
            severity=Severity.INFO,
        ))

    return PolicyDecision(
        outcome=outcome,
        reasons=tuple(reasons),
        alternatives=_alternatives(inputs),
        coach=coaching_tips(inputs),
    )
