"""
Tests for kernel domain value objects and utilities.

Covers:
- Workflow declaration validation and lookups
- Time-ordered ids
- DeterministicClock
- Catalog value object validation
- Exception codes and structured attributes
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from booking_kernel.domain.catalog import (
    Beneficiary,
    BeneficiaryType,
    ServiceCategory,
    ServiceDefinition,
    ServiceModule,
)
from booking_kernel.domain.clock import DeterministicClock
from booking_kernel.domain.policy import CorporateProgramState, CorporateProgramStatus
from booking_kernel.domain.workflow import Transition, Workflow
from booking_kernel.exceptions import (
    BookingKernelError,
    InvalidTransitionError,
    PolicyGateError,
    RefundPendingError,
)
from booking_kernel.utils.hashing import canonicalize_json, hash_payload
from booking_kernel.utils.ids import new_display_id, new_ordered_id

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestWorkflow:

    def _workflow(self, **overrides) -> Workflow:
        params = dict(
            name="w",
            description="test",
            initial_state="a",
            states=("a", "b", "c"),
            transitions=(Transition("a", "b", "go"), Transition("b", "c", "finish")),
            terminal_states=("c",),
        )
        params.update(overrides)
        return Workflow(**params)

    def test_find(self):
        wf = self._workflow()
        assert wf.find("a", "go").to_state == "b"
        assert wf.find("a", "finish") is None

    def test_undeclared_state_rejected(self):
        with pytest.raises(ValueError):
            self._workflow(transitions=(Transition("a", "z", "go"),))

    def test_initial_state_must_be_declared(self):
        with pytest.raises(ValueError):
            self._workflow(initial_state="z")

    def test_terminal_state_cannot_have_exits(self):
        with pytest.raises(ValueError):
            self._workflow(transitions=(Transition("c", "a", "reopen"),))


class TestIds:

    def test_ordered_ids_sort_by_time(self):
        ids = [new_ordered_id(T0 + timedelta(seconds=i)) for i in range(5)]
        assert sorted(ids, key=str) == ids
        assert all(i.version == 7 for i in ids)

    def test_same_instant_ids_differ(self):
        assert new_ordered_id(T0) != new_ordered_id(T0)

    def test_display_id_shape(self):
        display = new_display_id("BKG", T0)
        prefix, middle, tail = display.split("-")
        assert prefix == "BKG"
        assert len(middle) == 12
        assert len(tail) == 4

    def test_multi_part_prefix(self):
        assert new_display_id("RCPT-SVC", T0).startswith("RCPT-SVC-")


class TestClock:

    def test_fixed_until_advanced(self):
        clock = DeterministicClock(T0)
        assert clock.now() == clock.now() == T0
        clock.advance(minutes=2)
        assert clock.now() == T0 + timedelta(minutes=2)
        assert clock.tick() == T0 + timedelta(minutes=2, seconds=1)

    def test_set_time_resets_offset(self):
        clock = DeterministicClock(T0)
        clock.advance(hours=5)
        clock.set_time(T0 - timedelta(days=1))
        assert clock.now() == T0 - timedelta(days=1)


class TestValueObjects:

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            ServiceDefinition(
                id="s", module=ServiceModule.OTHER, category=ServiceCategory.OTHER,
                title="x", vendor_id="v", base_price=Decimal("-1"),
                approval_threshold=Decimal("0"),
            )

    def test_beneficiary_descriptor(self):
        visitor = Beneficiary(id="vis", name="Guest", type=BeneficiaryType.VISITOR)
        assert visitor.descriptor == "Guest (Visitor)"

    def test_grace_window(self):
        program = CorporateProgramState(
            CorporateProgramStatus.BILLING_DELINQUENCY,
            grace_enabled=True,
            grace_expires_at=T0,
        )
        assert program.grace_active(T0 - timedelta(seconds=1))
        assert not program.grace_active(T0)

    def test_grace_only_for_delinquency(self):
        program = CorporateProgramState(
            CorporateProgramStatus.DEPOSIT_DEPLETED,
            grace_enabled=True,
            grace_expires_at=T0 + timedelta(days=1),
        )
        assert not program.grace_active(T0)


class TestHashing:

    def test_key_order_irrelevant(self):
        assert hash_payload({"a": 1, "b": 2}) == hash_payload({"b": 2, "a": 1})

    def test_decimal_normalized(self):
        assert canonicalize_json({"x": Decimal("1.50")}) == canonicalize_json(
            {"x": Decimal("1.5")}
        )


class TestExceptions:

    def test_all_carry_codes(self):
        assert InvalidTransitionError("Draft", "complete").code == "INVALID_TRANSITION"
        assert RefundPendingError("BKG-1", "pending").code == "REFUND_PENDING"

    def test_policy_gate_is_invalid_transition(self):
        err = PolicyGateError("Draft", "confirm_booking", "Blocked", "Allowed")
        assert isinstance(err, InvalidTransitionError)
        assert isinstance(err, BookingKernelError)
        assert "Blocked" in str(err)
