"""
Policy domain types (``booking_kernel.domain.policy``).

Responsibility
--------------
Pure value objects for corporate payment policy evaluation: payment
methods, corporate program status, the evaluator's input bundle and the
resulting ``PolicyDecision``.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``PolicyDecision`` is frozen and built only from tuples, so two decisions
  computed from equal inputs compare equal.
* ``CorporateProgramState.grace_active`` never reads the clock; ``now`` is
  an argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from booking_kernel.domain.catalog import (
    Beneficiary,
    Role,
    ServiceDefinition,
    Vendor,
)


class PaymentMethod(str, Enum):
    CORPORATE_PAY = "CorporatePay"
    PERSONAL_WALLET = "Personal Wallet"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"

    @property
    def is_corporate(self) -> bool:
        return self is PaymentMethod.CORPORATE_PAY


class CorporateProgramStatus(str, Enum):
    """Standing of the organization's CorporatePay program."""

    ELIGIBLE = "Eligible"
    NOT_LINKED = "Not linked"
    NOT_ELIGIBLE = "Not eligible"
    DEPOSIT_DEPLETED = "Deposit depleted"
    CREDIT_LIMIT_EXCEEDED = "Credit limit exceeded"
    BILLING_DELINQUENCY = "Billing delinquency"


# Statuses that block CorporatePay unconditionally.  Billing delinquency
# blocks only when no grace window is active.
HARD_BLOCKING_STATUSES: frozenset[CorporateProgramStatus] = frozenset({
    CorporateProgramStatus.NOT_LINKED,
    CorporateProgramStatus.NOT_ELIGIBLE,
    CorporateProgramStatus.DEPOSIT_DEPLETED,
    CorporateProgramStatus.CREDIT_LIMIT_EXCEEDED,
})


@dataclass(frozen=True)
class CorporateProgramState:
    """Program status as supplied by the corporate program provider."""

    status: CorporateProgramStatus
    grace_enabled: bool = False
    grace_expires_at: datetime | None = None

    def grace_active(self, now: datetime) -> bool:
        """True while a delinquent program is inside its grace window."""
        return (
            self.status is CorporateProgramStatus.BILLING_DELINQUENCY
            and self.grace_enabled
            and self.grace_expires_at is not None
            and now < self.grace_expires_at
        )


class Outcome(str, Enum):
    ALLOWED = "Allowed"
    APPROVAL_REQUIRED = "Approval required"
    BLOCKED = "Blocked"


class Severity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


class ReasonCode(str, Enum):
    """Machine-readable category attached to each policy reason."""

    PROGRAM = "PROGRAM"
    FIELDS = "FIELDS"
    ATTACH = "ATTACH"
    VENDOR = "VENDOR"
    AMOUNT = "AMOUNT"
    OK = "OK"


class CorporateState(str, Enum):
    """Simplified display state of the CorporatePay option."""

    AVAILABLE = "Available"
    REQUIRES_APPROVAL = "Requires approval"
    NOT_AVAILABLE = "Not available"


@dataclass(frozen=True)
class Reason:
    code: ReasonCode
    title: str
    detail: str
    severity: Severity


@dataclass(frozen=True)
class Alternative:
    """A suggested change and the outcome it is expected to produce."""

    id: str
    title: str
    description: str
    expected_outcome: Outcome


@dataclass(frozen=True)
class CoachTip:
    """Advisory hint.  Never affects the outcome."""

    id: str
    title: str
    description: str


@dataclass(frozen=True)
class PolicyInputs:
    """Everything the policy evaluator looks at.

    ``notes_min_length`` comes from engine settings; it travels with the
    inputs so that the evaluator stays a pure function of one argument.
    """

    payment_method: PaymentMethod
    program_status: CorporateProgramStatus
    grace_active: bool
    service: ServiceDefinition
    vendor: Vendor
    amount: Decimal
    cost_center: str = ""
    purpose: str = ""
    notes: str = ""
    attachment_count: int = 0
    role: Role = Role.EMPLOYEE
    beneficiary: Beneficiary | None = None
    notes_min_length: int = 10
    currency: str = "UGX"

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("amount cannot be negative")
        if self.attachment_count < 0:
            raise ValueError("attachment_count cannot be negative")
        if self.vendor.id != self.service.vendor_id:
            raise ValueError(
                f"vendor {self.vendor.id} does not serve {self.service.id} "
                f"(expected {self.service.vendor_id})"
            )


@dataclass(frozen=True)
class PolicyDecision:
    """Result of evaluating corporate policy.  A view, never persisted."""

    outcome: Outcome
    reasons: tuple[Reason, ...]
    alternatives: tuple[Alternative, ...] = ()
    coach: tuple[CoachTip, ...] = ()

    @property
    def codes(self) -> tuple[ReasonCode, ...]:
        return tuple(r.code for r in self.reasons)

    def has_severity(self, severity: Severity) -> bool:
        return any(r.severity is severity for r in self.reasons)
