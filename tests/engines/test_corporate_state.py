"""Tests for CorporatePay display state resolution."""

import pytest

from booking_engines.corporate_state import program_gate_blocks, resolve
from booking_kernel.domain.policy import (
    CorporateProgramStatus,
    CorporateState,
    Outcome,
    PaymentMethod,
    PolicyDecision,
)


def decision(outcome: Outcome) -> PolicyDecision:
    return PolicyDecision(outcome=outcome, reasons=())


class TestProgramGate:

    @pytest.mark.parametrize("status", [
        CorporateProgramStatus.NOT_LINKED,
        CorporateProgramStatus.NOT_ELIGIBLE,
        CorporateProgramStatus.DEPOSIT_DEPLETED,
        CorporateProgramStatus.CREDIT_LIMIT_EXCEEDED,
    ])
    @pytest.mark.parametrize("grace", [True, False])
    def test_hard_statuses_always_block(self, status, grace):
        assert program_gate_blocks(status, grace) is True

    def test_delinquency_depends_on_grace(self):
        status = CorporateProgramStatus.BILLING_DELINQUENCY
        assert program_gate_blocks(status, grace_active=False) is True
        assert program_gate_blocks(status, grace_active=True) is False

    def test_eligible_never_blocks(self):
        assert program_gate_blocks(CorporateProgramStatus.ELIGIBLE, False) is False


class TestResolve:

    def test_personal_payment_is_available(self):
        state = resolve(
            PaymentMethod.PERSONAL_WALLET,
            CorporateProgramStatus.DEPOSIT_DEPLETED,
            False,
            decision(Outcome.ALLOWED),
        )
        assert state is CorporateState.AVAILABLE

    def test_program_block_is_not_available(self):
        state = resolve(
            PaymentMethod.CORPORATE_PAY,
            CorporateProgramStatus.NOT_LINKED,
            False,
            decision(Outcome.ALLOWED),
        )
        assert state is CorporateState.NOT_AVAILABLE

    @pytest.mark.parametrize("outcome, expected", [
        (Outcome.ALLOWED, CorporateState.AVAILABLE),
        (Outcome.APPROVAL_REQUIRED, CorporateState.REQUIRES_APPROVAL),
        (Outcome.BLOCKED, CorporateState.NOT_AVAILABLE),
    ])
    def test_follows_policy_outcome(self, outcome, expected):
        state = resolve(
            PaymentMethod.CORPORATE_PAY,
            CorporateProgramStatus.ELIGIBLE,
            False,
            decision(outcome),
        )
        assert state is expected

    def test_grace_window_requires_approval(self):
        state = resolve(
            PaymentMethod.CORPORATE_PAY,
            CorporateProgramStatus.BILLING_DELINQUENCY,
            True,
            decision(Outcome.APPROVAL_REQUIRED),
        )
        assert state is CorporateState.REQUIRES_APPROVAL
