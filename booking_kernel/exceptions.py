"""
Typed Exception Hierarchy for the Booking Kernel.

===============================================================================
WHAT IS (AND IS NOT) AN EXCEPTION
===============================================================================

Expected policy violations are NOT exceptions.  A missing cost center, an
amount above the approval threshold, or a restricted vendor are reported as
``Reason`` entries inside a ``PolicyDecision`` so that the caller can show
them next to the form field that caused them.

Exceptions are reserved for:
  - Malformed input (unknown service/vendor id)
  - Illegal state changes (transition not in the booking workflow)
  - Operator actions missing mandatory data (dispute without a reason)
  - Asynchronous settlement that has not (yet) succeeded

Every exception carries:
  1. A CODE class attribute (machine-readable, API-safe)
  2. Structured attributes (not just a message string)

Example:
    try:
        manager.cancel(actor="requester")
    except InvalidTransitionError as e:
        api_response(code=e.code, state=e.from_state, action=e.action)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BookingKernelError (base)
    |
    +-- ReferenceError_
    |   +-- ReferenceNotFoundError
    |
    +-- TransitionError
    |   +-- InvalidTransitionError
    |       +-- PolicyGateError
    |
    +-- DisputeError
    |   +-- MissingFieldError
    |   +-- DisputeAlreadyOpenError
    |   +-- DisputeNotFoundError
    |
    +-- SettlementError
        +-- RefundPendingError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                  | When Raised
------------|-----------------------|---------------------------------------------
Reference   | REFERENCE_NOT_FOUND   | Unknown service / vendor / beneficiary id
------------|-----------------------|---------------------------------------------
Transition  | INVALID_TRANSITION    | Requested edge not in the booking workflow
            | POLICY_GATE_FAILED    | Submission edge refused by policy outcome
------------|-----------------------|---------------------------------------------
Dispute     | MISSING_FIELD         | Dispute opened without a reason
            | DISPUTE_ALREADY_OPEN  | Second dispute while one is Open
            | DISPUTE_NOT_FOUND     | Unknown dispute id
------------|-----------------------|---------------------------------------------
Settlement  | REFUND_PENDING        | Refund not confirmed (retryable)
"""


class BookingKernelError(Exception):
    """
    Base exception for all booking kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BOOKING_KERNEL_ERROR"


# Reference-related exceptions


class ReferenceError_(BookingKernelError):
    """Base exception for catalog reference errors."""

    code: str = "REFERENCE_ERROR"


class ReferenceNotFoundError(ReferenceError_):
    """A service, vendor or beneficiary id is not in the catalog."""

    code: str = "REFERENCE_NOT_FOUND"

    def __init__(self, kind: str, reference_id: str):
        self.kind = kind
        self.reference_id = reference_id
        super().__init__(f"Unknown {kind}: {reference_id}")


# Transition-related exceptions


class TransitionError(BookingKernelError):
    """Base exception for booking state machine errors."""

    code: str = "TRANSITION_ERROR"


class InvalidTransitionError(TransitionError):
    """
    Requested state change is not in the booking workflow.

    Raised before any mutation: booking state and timeline are unchanged.
    """

    code: str = "INVALID_TRANSITION"

    def __init__(self, from_state: str, action: str, detail: str = ""):
        self.from_state = from_state
        self.action = action
        self.detail = detail
        message = f"Cannot '{action}' from state '{from_state}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PolicyGateError(InvalidTransitionError):
    """The current policy outcome does not permit this submission edge."""

    code: str = "POLICY_GATE_FAILED"

    def __init__(self, from_state: str, action: str, outcome: str, required: str):
        self.outcome = outcome
        self.required = required
        super().__init__(
            from_state,
            action,
            f"policy outcome is '{outcome}', requires '{required}'",
        )


# Dispute-related exceptions


class DisputeError(BookingKernelError):
    """Base exception for dispute handling errors."""

    code: str = "DISPUTE_ERROR"


class MissingFieldError(DisputeError):
    """A mandatory field was empty."""

    code: str = "MISSING_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Missing required field: {field_name}")


class DisputeAlreadyOpenError(DisputeError):
    """At most one dispute may be Open per booking."""

    code: str = "DISPUTE_ALREADY_OPEN"

    def __init__(self, booking_id: str, dispute_id: str):
        self.booking_id = booking_id
        self.dispute_id = dispute_id
        super().__init__(
            f"Booking {booking_id} already has open dispute {dispute_id}"
        )


class DisputeNotFoundError(DisputeError):
    """Dispute with given id does not belong to the booking."""

    code: str = "DISPUTE_NOT_FOUND"

    def __init__(self, dispute_id: str):
        self.dispute_id = dispute_id
        super().__init__(f"Dispute not found: {dispute_id}")


# Settlement-related exceptions


class SettlementError(BookingKernelError):
    """Base exception for payment settlement errors."""

    code: str = "SETTLEMENT_ERROR"


class RefundPendingError(SettlementError):
    """
    Settlement confirmation has not arrived or has failed.

    Retryable.  The booking stays in Refund processing; it is never
    advanced to Refunded without an explicit successful confirmation.
    """

    code: str = "REFUND_PENDING"

    def __init__(self, booking_id: str, reason: str):
        self.booking_id = booking_id
        self.reason = reason
        super().__init__(f"Refund for booking {booking_id} still pending: {reason}")
