"""
Hypothesis-based property tests.

Property-based testing using Hypothesis to generate policy inputs and
transition sequences and verify invariants hold.

Properties fuzzed here:
- Personal payment is always Allowed
- Hard program statuses always Block, whatever the other fields
- Active grace never blocks on the program alone
- evaluate() is idempotent
- The display state is never Available for a Blocked CorporatePay decision
- Random operation sequences keep the booking inside the workflow, the
  timeline ordered, and at most one dispute Open
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from booking_config import get_active_config
from booking_engines.corporate_state import resolve
from booking_engines.policy import evaluate
from booking_kernel.domain.booking import BookingState, DisputeStatus
from booking_kernel.domain.catalog import Role
from booking_kernel.domain.clock import DeterministicClock
from booking_kernel.domain.policy import (
    HARD_BLOCKING_STATUSES,
    CorporateProgramState,
    CorporateProgramStatus,
    CorporateState,
    Outcome,
    PaymentMethod,
    PolicyInputs,
    ReasonCode,
)
from booking_kernel.exceptions import BookingKernelError
from booking_services.lifecycle import BOOKING_WORKFLOW, BookingLifecycleManager
from booking_services.settlement import SettlementResult

CONFIG = get_active_config()
CATALOG = CONFIG.catalog
T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Strategies
# =============================================================================

amounts = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("5000000"), places=0,
    allow_nan=False, allow_infinity=False,
)
short_text = st.text(max_size=30)


@st.composite
def policy_inputs(draw, payment_method=None, program_status=None, grace_active=None):
    service = draw(st.sampled_from(CATALOG.services))
    return PolicyInputs(
        payment_method=payment_method or draw(st.sampled_from(PaymentMethod)),
        program_status=program_status or draw(st.sampled_from(CorporateProgramStatus)),
        grace_active=draw(st.booleans()) if grace_active is None else grace_active,
        service=service,
        vendor=CATALOG.vendor_for(service),
        amount=draw(amounts),
        cost_center=draw(st.sampled_from(("", "OPS-01", "  "))),
        purpose=draw(short_text),
        notes=draw(short_text),
        attachment_count=draw(st.integers(min_value=0, max_value=5)),
        role=draw(st.sampled_from(Role)),
        beneficiary=draw(st.sampled_from(CATALOG.beneficiaries)),
    )


# =============================================================================
# Policy properties
# =============================================================================


class TestPolicyProperties:

    @given(inputs=policy_inputs(payment_method=PaymentMethod.PERSONAL_WALLET))
    def test_personal_payment_always_allowed(self, inputs):
        assert evaluate(inputs).outcome is Outcome.ALLOWED

    @given(
        inputs=policy_inputs(payment_method=PaymentMethod.CORPORATE_PAY),
        status=st.sampled_from(sorted(HARD_BLOCKING_STATUSES)),
    )
    def test_hard_program_status_blocks(self, inputs, status):
        from dataclasses import replace

        decision = evaluate(replace(inputs, program_status=status))
        assert decision.outcome is Outcome.BLOCKED
        assert decision.codes == (ReasonCode.PROGRAM,)

    @given(inputs=policy_inputs(
        payment_method=PaymentMethod.CORPORATE_PAY,
        program_status=CorporateProgramStatus.BILLING_DELINQUENCY,
        grace_active=True,
    ))
    def test_grace_never_blocks_on_program_alone(self, inputs):
        decision = evaluate(inputs)
        critical_program = [
            r for r in decision.reasons
            if r.code is ReasonCode.PROGRAM and r.severity.value == "Critical"
        ]
        assert critical_program == []

    @given(inputs=policy_inputs())
    def test_evaluate_idempotent(self, inputs):
        assert evaluate(inputs) == evaluate(inputs)

    @given(inputs=policy_inputs())
    def test_blocked_is_never_available(self, inputs):
        decision = evaluate(inputs)
        state = resolve(
            inputs.payment_method, inputs.program_status, inputs.grace_active, decision,
        )
        if inputs.payment_method.is_corporate and decision.outcome is Outcome.BLOCKED:
            assert state is not CorporateState.AVAILABLE


# =============================================================================
# Lifecycle properties
# =============================================================================

OPERATIONS = (
    "confirm_booking",
    "submit_for_approval",
    "approve",
    "request_changes",
    "revise",
    "vendor_confirm",
    "start_service",
    "complete",
    "cancel",
    "settle_ok",
    "settle_fail",
    "open_dispute",
    "wait",
)

PROGRAM = CorporateProgramState(CorporateProgramStatus.ELIGIBLE)


def _apply(manager: BookingLifecycleManager, clock: DeterministicClock, op: str) -> None:
    if op in ("confirm_booking", "submit_for_approval"):
        getattr(manager, op)(PROGRAM)
    elif op == "settle_ok":
        manager.settle_refund(SettlementResult.success("RF"))
    elif op == "settle_fail":
        manager.settle_refund(SettlementResult.failure("declined"))
    elif op == "open_dispute":
        manager.open_dispute("Fuzzed complaint")
    elif op == "wait":
        clock.advance(hours=30)
        manager.check_sla(clock.now())
    else:
        getattr(manager, op)()


class TestLifecycleProperties:

    @settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow])
    @given(
        service_id=st.sampled_from([s.id for s in CATALOG.services]),
        amount=amounts,
        ops=st.lists(st.sampled_from(OPERATIONS), max_size=15),
    )
    def test_random_sequences_respect_workflow(self, service_id, amount, ops):
        clock = DeterministicClock(T0)
        manager = BookingLifecycleManager.start(
            CONFIG,
            service_id=service_id,
            beneficiary_id="me",
            purpose="Operations",
            notes="Fuzzed booking notes",
            amount=amount,
            clock=clock,
        )
        edges = BOOKING_WORKFLOW.edges()

        for op in ops:
            before = manager.booking
            try:
                _apply(manager, clock, op)
            except BookingKernelError:
                if op not in ("settle_fail", "open_dispute"):
                    assert manager.booking == before
                continue

            after = manager.booking
            if after.state is not before.state:
                assert (before.state.value, after.state.value) in edges or (
                    op == "cancel"
                    and after.state is BookingState.REFUND_PROCESSING
                )

        booking = manager.booking
        stamps = [e.timestamp for e in booking.timeline]
        assert stamps == sorted(stamps)
        assert sum(d.status is DisputeStatus.OPEN for d in booking.disputes) <= 1
        if booking.receipt is not None:
            assert booking.receipt.status is BookingState.PENDING_CONFIRMATION
        if booking.state is BookingState.SLA_BREACHED:
            assert booking.disputes

    @given(delta=st.integers(min_value=-3600, max_value=3600))
    def test_clock_rewind_keeps_timeline_ordered(self, delta):
        clock = DeterministicClock(T0)
        manager = BookingLifecycleManager.start(
            CONFIG,
            service_id="svc_faith",
            beneficiary_id="me",
            payment_method=PaymentMethod.PERSONAL_WALLET,
            clock=clock,
        )
        clock.set_time(T0 + timedelta(seconds=delta))
        manager.confirm_booking(PROGRAM)
        manager.cancel()

        stamps = [e.timestamp for e in manager.timeline]
        assert stamps == sorted(stamps)
        assert stamps[-1] >= T0
