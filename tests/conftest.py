"""
Pytest fixtures for the booking engine test suite.

Provides:
- Structured logging setup and a ``captured_logs`` fixture
- A DeterministicClock
- The default configuration set and its catalog
- Factories for lifecycle managers and corporate program states
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO

import pytest

from booking_config import get_active_config
from booking_kernel.domain.catalog import AttachmentRef
from booking_kernel.domain.clock import DeterministicClock
from booking_kernel.domain.policy import (
    CorporateProgramState,
    CorporateProgramStatus,
)
from booking_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from booking_services.lifecycle import BookingLifecycleManager

FIXED_NOW = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)

ATTACHMENT = AttachmentRef(
    id="att-1", name="Agenda.pdf", size=48_000, content_type="application/pdf",
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture booking_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, manager):
            manager.cancel()
            logs = captured_logs()
            assert any(r["message"] == "booking_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("booking_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time and configuration
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture(scope="session")
def config():
    """The shipped default configuration set."""
    return get_active_config()


@pytest.fixture(scope="session")
def catalog(config):
    return config.catalog


# =============================================================================
# Corporate program states
# =============================================================================


def make_program(
    status: CorporateProgramStatus = CorporateProgramStatus.ELIGIBLE,
    grace_enabled: bool = False,
    grace_expires_at: datetime | None = None,
) -> CorporateProgramState:
    return CorporateProgramState(
        status=status,
        grace_enabled=grace_enabled,
        grace_expires_at=grace_expires_at,
    )


@pytest.fixture
def eligible_program() -> CorporateProgramState:
    return make_program()


@pytest.fixture
def grace_program() -> CorporateProgramState:
    """Billing delinquency inside an active grace window."""
    return make_program(
        CorporateProgramStatus.BILLING_DELINQUENCY,
        grace_enabled=True,
        grace_expires_at=FIXED_NOW + timedelta(days=3),
    )


# =============================================================================
# Lifecycle managers
# =============================================================================


@pytest.fixture
def make_manager(config, clock):
    """
    Factory for Draft bookings against the default catalog.

    Defaults describe a booking that policy allows outright: a training
    course (no purpose or notes required, under threshold) booked for
    yourself on cost center OPS-01 with one attachment.
    """

    def _make(**overrides) -> BookingLifecycleManager:
        params = {
            "service_id": "svc_training",
            "beneficiary_id": "me",
            "attachment_refs": (ATTACHMENT,),
        }
        params.update(overrides)
        return BookingLifecycleManager.start(config, clock=clock, **params)

    return _make


@pytest.fixture
def allowed_manager(make_manager) -> BookingLifecycleManager:
    return make_manager()


@pytest.fixture
def approval_manager(make_manager) -> BookingLifecycleManager:
    """Draft whose only policy finding is the amount threshold warning."""
    return make_manager(
        service_id="svc_room",
        purpose="Client meeting",
        amount=Decimal("250000"),
    )
