"""
Tests for booking log output (booking_kernel/logging_config.py).

Covers what the booking engine relies on:
- Transition records carry the booking and actor bound by the manager
- Kernel error context is flattened into exc_* fields
- Money, states and SLA durations render as JSON scalars
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO

import pytest

from booking_kernel.domain.booking import Actor, BookingState
from booking_kernel.exceptions import (
    InvalidTransitionError,
    PolicyGateError,
    RefundPendingError,
)
from booking_kernel.logging_config import (
    LogContext,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture
def log_stream():
    """Route booking_kernel logs into a fresh JSON stream."""
    reset_logging()
    stream = StringIO()
    configure_logging(stream=stream, level=logging.DEBUG)

    def _records() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    yield _records
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _log_error(exc: Exception) -> None:
    try:
        raise exc
    except Exception:
        get_logger("test").error("operation_failed", exc_info=True)


class TestTransitionContext:

    def test_commit_binds_booking_and_actor(self, log_stream, allowed_manager, eligible_program):
        allowed_manager.confirm_booking(eligible_program, actor=Actor.REQUESTER)

        transitions = [r for r in log_stream() if r["message"] == "booking_transition"]
        assert len(transitions) == 1
        record = transitions[0]
        assert record["booking_id"] == allowed_manager.booking.id
        assert record["actor_id"] == Actor.REQUESTER.value
        assert record["from_state"] == "Draft"
        assert record["to_state"] == "Pending confirmation"
        assert record["logger"] == "booking_kernel.services.lifecycle"

    def test_binding_does_not_outlive_commit(self, log_stream, allowed_manager, eligible_program):
        allowed_manager.confirm_booking(eligible_program)
        get_logger("test").info("after_commit")

        after = [r for r in log_stream() if r["message"] == "after_commit"][0]
        assert "booking_id" not in after
        assert LogContext.get_all() == {}

    def test_caller_correlation_id_kept(self, log_stream, allowed_manager):
        with LogContext.bind(correlation_id="checkout-42"):
            allowed_manager.cancel()

        transitions = [r for r in log_stream() if r["message"] == "booking_transition"]
        assert [r["to_state"] for r in transitions] == ["Cancelled", "Refund processing"]
        assert all(r["correlation_id"] == "checkout-42" for r in transitions)
        assert transitions[1]["actor_id"] == Actor.SYSTEM.value

    def test_unknown_context_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(event_id="x")


class TestKernelErrorFields:

    def test_invalid_transition(self, log_stream):
        _log_error(InvalidTransitionError("Completed", "cancel"))

        record = log_stream()[0]
        assert record["exc_code"] == "INVALID_TRANSITION"
        assert record["exc_from_state"] == "Completed"
        assert record["exc_action"] == "cancel"
        assert "traceback" in record

    def test_policy_gate(self, log_stream):
        _log_error(PolicyGateError("Draft", "confirm_booking", "Blocked", "Allowed"))

        record = log_stream()[0]
        assert record["exc_type"] == "PolicyGateError"
        assert record["exc_outcome"] == "Blocked"
        assert record["exc_required"] == "Allowed"

    def test_refund_pending(self, log_stream):
        _log_error(RefundPendingError("BKG-1", "issuer declined"))

        record = log_stream()[0]
        assert record["exc_booking_id"] == "BKG-1"
        assert record["exc_reason"] == "issuer declined"

    def test_plain_error_has_no_code(self, log_stream):
        _log_error(ValueError("boom"))

        record = log_stream()[0]
        assert record["exc_type"] == "ValueError"
        assert "exc_code" not in record


class TestDomainValueEncoding:

    def test_money_state_and_durations(self, log_stream):
        at = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        get_logger("test").info(
            "booking_snapshot",
            extra={
                "amount": Decimal("250000.50"),
                "state": BookingState.SLA_BREACHED,
                "due_at": at,
                "remaining": timedelta(minutes=5),
            },
        )

        record = log_stream()[0]
        assert record["amount"] == "250000.50"
        assert record["state"] == "SLA breached"
        assert record["due_at"] == at.isoformat()
        assert record["remaining"] == 300.0

    def test_configure_is_idempotent(self, log_stream):
        configure_logging(stream=StringIO())
        get_logger("test").info("once")

        assert [r["message"] for r in log_stream()] == ["once"]
