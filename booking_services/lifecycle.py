"""
booking_services.lifecycle -- Booking state machine execution.

Responsibility:
    Owns one ``Booking`` and is the only component that changes it.
    Executes transitions from ``BOOKING_WORKFLOW``, enforces the policy
    gate on submission edges, fixes SLA due dates and generates the receipt
    on first entry to Pending confirmation, appends timeline events, and
    applies dispute and settlement results.

Architecture position:
    Services layer.  Thin coordinator: delegates policy to
    ``booking_engines.policy``, deadlines to ``booking_engines.sla``,
    receipts to ``booking_engines.receipt`` and dispute rules to
    ``booking_services.disputes``.

Invariants enforced:
    - Only edges declared in ``BOOKING_WORKFLOW`` are taken.  Anything else
      raises ``InvalidTransitionError`` before any mutation.
    - Each transition appends exactly one timeline event; timestamps never
      go backwards.
    - SLA due dates and the receipt are set once and never recomputed.
    - SLA breach is reachable only through ``check_sla``.
    - Refunded is reached only on an explicit successful settlement.
    - Transitions on one booking are serialized by a lock.

Failure modes:
    - InvalidTransitionError / PolicyGateError: illegal or gated edge.
    - ReferenceNotFoundError: booking references unknown catalog ids.
    - RefundPendingError: settlement failed; booking stays in Refund
      processing.
"""

from __future__ import annotations

import dataclasses
import threading
import time
from datetime import datetime
from decimal import Decimal
from typing import Any

from booking_config.schema import BookingConfiguration
from booking_engines.corporate_state import resolve as resolve_corporate_state
from booking_engines.policy import evaluate as evaluate_policy
from booking_engines.pricing import estimate_amount
from booking_engines.receipt import generate_receipt
from booking_engines.sla import compute_due_dates, is_breached
from booking_kernel.domain.booking import (
    TERMINAL_BOOKING_STATES,
    Actor,
    Booking,
    BookingState,
    Dispute,
    TimelineEvent,
)
from booking_kernel.domain.catalog import AttachmentRef, Role
from booking_kernel.domain.clock import Clock, SystemClock
from booking_kernel.domain.policy import (
    CorporateProgramState,
    CorporateState,
    Outcome,
    PaymentMethod,
    PolicyDecision,
    PolicyInputs,
)
from booking_kernel.domain.workflow import Guard, Transition, Workflow
from booking_kernel.exceptions import (
    InvalidTransitionError,
    PolicyGateError,
    RefundPendingError,
)
from booking_kernel.logging_config import LogContext, get_logger
from booking_kernel.utils.ids import new_display_id, new_ordered_id
from booking_services.disputes import DisputeAutomation
from booking_services.settlement import AWAITING_CONFIRMATION, SettlementResult

logger = get_logger("services.lifecycle")

TRACE_TYPE_BOOKING_TRANSITION = "BOOKING_TRANSITION"

REFUND_FAILED_TITLE = "Refund attempt failed"

_S = BookingState

GUARD_POLICY_ALLOWED = Guard(
    name="policy_allowed",
    description="Current policy outcome is Allowed",
)
GUARD_POLICY_APPROVAL_REQUIRED = Guard(
    name="policy_approval_required",
    description="Current policy outcome is Approval required",
)

_GUARD_OUTCOMES: dict[str, Outcome] = {
    GUARD_POLICY_ALLOWED.name: Outcome.ALLOWED,
    GUARD_POLICY_APPROVAL_REQUIRED.name: Outcome.APPROVAL_REQUIRED,
}

_CANCELLABLE = (
    _S.DRAFT,
    _S.PENDING_APPROVAL,
    _S.PENDING_CONFIRMATION,
    _S.CONFIRMED,
    _S.IN_PROGRESS,
    _S.NEEDS_CHANGES,
)


def _t(
    src: BookingState,
    dst: BookingState,
    action: str,
    guard: Guard | None = None,
    system_only: bool = False,
) -> Transition:
    return Transition(src.value, dst.value, action, guard=guard, system_only=system_only)


BOOKING_WORKFLOW = Workflow(
    name="service_booking",
    description="Corporate service booking lifecycle",
    initial_state=_S.DRAFT.value,
    states=tuple(s.value for s in BookingState),
    transitions=(
        _t(_S.DRAFT, _S.PENDING_APPROVAL, "submit_for_approval",
           guard=GUARD_POLICY_APPROVAL_REQUIRED),
        _t(_S.DRAFT, _S.PENDING_CONFIRMATION, "confirm_booking",
           guard=GUARD_POLICY_ALLOWED),
        _t(_S.PENDING_APPROVAL, _S.PENDING_CONFIRMATION, "approve"),
        _t(_S.PENDING_APPROVAL, _S.NEEDS_CHANGES, "request_changes"),
        _t(_S.NEEDS_CHANGES, _S.DRAFT, "revise"),
        _t(_S.PENDING_CONFIRMATION, _S.CONFIRMED, "vendor_confirm"),
        _t(_S.CONFIRMED, _S.IN_PROGRESS, "start_service"),
        _t(_S.CONFIRMED, _S.COMPLETED, "complete"),
        _t(_S.IN_PROGRESS, _S.COMPLETED, "complete"),
        _t(_S.PENDING_CONFIRMATION, _S.SLA_BREACHED, "breach_sla", system_only=True),
        _t(_S.CONFIRMED, _S.SLA_BREACHED, "breach_sla", system_only=True),
        _t(_S.IN_PROGRESS, _S.SLA_BREACHED, "breach_sla", system_only=True),
        *(_t(src, _S.CANCELLED, "cancel") for src in _CANCELLABLE),
        _t(_S.CANCELLED, _S.REFUND_PROCESSING, "begin_refund", system_only=True),
        _t(_S.REFUND_PROCESSING, _S.REFUNDED, "settle_refund"),
    ),
    terminal_states=tuple(s.value for s in TERMINAL_BOOKING_STATES),
)

# Fields a requester may edit while the booking is a Draft.
_DRAFT_FIELDS = frozenset({
    "service_id",
    "beneficiary_id",
    "payment_method",
    "role",
    "cost_center",
    "purpose",
    "notes",
    "attachment_refs",
    "scheduled_at",
    "amount",
})


class BookingLifecycleManager:
    """Executes lifecycle transitions for a single booking.

    Use ``start()`` to open a new Draft.  Read the current aggregate through
    ``booking``; it is a frozen value and is replaced, never mutated.

    Args:
        booking: The booking to manage.
        config: Active booking configuration (catalog and settings).
        clock: Time source.  Defaults to the system clock.
        disputes: Dispute automation; built from config settings if omitted.
    """

    def __init__(
        self,
        booking: Booking,
        config: BookingConfiguration,
        clock: Clock | None = None,
        disputes: DisputeAutomation | None = None,
    ):
        self._booking = booking
        self._config = config
        self._clock = clock or SystemClock()
        self._disputes = disputes or DisputeAutomation(
            auto_dispute_enabled=config.settings.auto_dispute_enabled,
        )
        self._lock = threading.RLock()
        self._admitting_decision: PolicyDecision | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def start(
        cls,
        config: BookingConfiguration,
        *,
        service_id: str,
        beneficiary_id: str,
        payment_method: PaymentMethod = PaymentMethod.CORPORATE_PAY,
        role: Role = Role.EMPLOYEE,
        cost_center: str | None = None,
        purpose: str = "",
        notes: str = "",
        attachment_refs: tuple[AttachmentRef, ...] = (),
        scheduled_at: datetime | None = None,
        amount: Decimal | None = None,
        clock: Clock | None = None,
        disputes: DisputeAutomation | None = None,
    ) -> BookingLifecycleManager:
        """Open a new Draft booking.

        The cost center defaults to the beneficiary's default cost center
        and the amount to the catalog estimate.

        Raises:
            ReferenceNotFoundError: unknown service, vendor or beneficiary.
        """
        clock = clock or SystemClock()
        catalog = config.catalog
        service = catalog.get_service(service_id)
        vendor = catalog.vendor_for(service)
        beneficiary = catalog.get_beneficiary(beneficiary_id)
        now = clock.now()

        booking = Booking(
            id=new_display_id("BKG", now),
            state=BookingState.DRAFT,
            created_at=now,
            service_id=service.id,
            vendor_id=vendor.id,
            amount=amount if amount is not None else estimate_amount(service, role, beneficiary),
            currency=config.organization.currency,
            payment_method=payment_method,
            beneficiary=beneficiary,
            role=role,
            cost_center=(
                cost_center if cost_center is not None
                else beneficiary.default_cost_center
            ),
            purpose=purpose,
            notes=notes,
            attachment_refs=tuple(attachment_refs),
            scheduled_at=scheduled_at,
            timeline=(
                TimelineEvent(
                    id=new_ordered_id(now),
                    timestamp=now,
                    title="Draft created",
                    detail=f"{service.title} with {vendor.name}",
                    actor=Actor.REQUESTER.value,
                ),
            ),
        )
        logger.info(
            "booking_created",
            extra={
                "booking_id": booking.id,
                "service_id": service.id,
                "vendor_id": vendor.id,
                "amount": booking.amount,
                "currency": booking.currency,
            },
        )
        return cls(booking, config, clock=clock, disputes=disputes)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def booking(self) -> Booking:
        return self._booking

    @property
    def state(self) -> BookingState:
        return self._booking.state

    @property
    def timeline(self) -> tuple[TimelineEvent, ...]:
        return self._booking.timeline

    # ------------------------------------------------------------------
    # Draft editing and policy
    # ------------------------------------------------------------------

    def update_draft(self, **changes: Any) -> Booking:
        """Edit requester-owned fields of a Draft.

        Changing the service re-derives the vendor; changing the service,
        beneficiary or role re-estimates the amount unless ``amount`` is
        passed too.  Changing the beneficiary resets the cost center to its
        default unless ``cost_center`` is passed too.  ``cost_center=None``
        means the beneficiary default, as in ``start()``.

        Raises:
            InvalidTransitionError: booking is not a Draft.
            TypeError: unknown field name.
        """
        unknown = set(changes) - _DRAFT_FIELDS
        if unknown:
            raise TypeError(f"Cannot edit fields: {', '.join(sorted(unknown))}")

        with self._lock:
            booking = self._booking
            if booking.state is not BookingState.DRAFT:
                self._reject("update_draft", "only Draft bookings are editable")

            catalog = self._config.catalog
            service = catalog.get_service(changes.pop("service_id", booking.service_id))
            vendor = catalog.vendor_for(service)
            beneficiary = booking.beneficiary
            if "beneficiary_id" in changes:
                beneficiary = catalog.get_beneficiary(changes.pop("beneficiary_id"))
                changes.setdefault("cost_center", beneficiary.default_cost_center)
            if "cost_center" in changes and changes["cost_center"] is None:
                changes["cost_center"] = beneficiary.default_cost_center
            role = changes.get("role", booking.role)

            repriced = (
                service.id != booking.service_id
                or beneficiary.id != booking.beneficiary.id
                or role is not booking.role
            )
            if repriced and "amount" not in changes:
                changes["amount"] = estimate_amount(service, role, beneficiary)
            if "attachment_refs" in changes:
                changes["attachment_refs"] = tuple(changes["attachment_refs"])

            self._booking = dataclasses.replace(
                booking,
                service_id=service.id,
                vendor_id=vendor.id,
                beneficiary=beneficiary,
                **changes,
            )
            logger.debug(
                "draft_updated",
                extra={"booking_id": booking.id, "fields": sorted(changes)},
            )
            return self._booking

    def policy_inputs(self, program: CorporateProgramState) -> PolicyInputs:
        """Assemble evaluator inputs from the booking, catalog and settings."""
        booking = self._booking
        catalog = self._config.catalog
        service = catalog.get_service(booking.service_id)
        return PolicyInputs(
            payment_method=booking.payment_method,
            program_status=program.status,
            grace_active=program.grace_active(self._clock.now()),
            service=service,
            vendor=catalog.get_vendor(booking.vendor_id),
            amount=booking.amount,
            cost_center=booking.cost_center,
            purpose=booking.purpose,
            notes=booking.notes,
            attachment_count=booking.attachment_count,
            role=booking.role,
            beneficiary=booking.beneficiary,
            notes_min_length=self._config.settings.notes_min_length,
            currency=booking.currency,
        )

    def evaluate(self, program: CorporateProgramState) -> PolicyDecision:
        """Current policy decision.  Advisory; safe to call at any time."""
        return evaluate_policy(self.policy_inputs(program))

    def corporate_state(self, program: CorporateProgramState) -> CorporateState:
        """Display state of the CorporatePay option for the current booking."""
        inputs = self.policy_inputs(program)
        return resolve_corporate_state(
            inputs.payment_method,
            inputs.program_status,
            inputs.grace_active,
            evaluate_policy(inputs),
        )

    # ------------------------------------------------------------------
    # Operator transitions
    # ------------------------------------------------------------------

    def submit_for_approval(
        self,
        program: CorporateProgramState,
        actor: Actor = Actor.REQUESTER,
    ) -> Booking:
        """Draft -> Pending approval.  Requires outcome Approval required."""
        with self._lock:
            transition = self._require("submit_for_approval")
            decision = self._check_gate(transition, program)
            now = self._now()
            request_id = new_display_id("REQ-SVC", now)
            self._admitting_decision = decision
            return self._commit(
                transition,
                actor=actor,
                at=now,
                detail=f"Approval request {request_id} sent to approver.",
                approval_request_id=request_id,
            )

    def confirm_booking(
        self,
        program: CorporateProgramState,
        actor: Actor = Actor.REQUESTER,
    ) -> Booking:
        """Draft -> Pending confirmation.  Requires outcome Allowed."""
        with self._lock:
            transition = self._require("confirm_booking")
            decision = self._check_gate(transition, program)
            self._admitting_decision = decision
            return self._enter_pending_confirmation(
                transition, actor, "Booking placed. Waiting for vendor confirmation.",
            )

    def approve(self, actor: Actor = Actor.APPROVER, note: str = "") -> Booking:
        """Pending approval -> Pending confirmation."""
        with self._lock:
            transition = self._require("approve")
            return self._enter_pending_confirmation(
                transition, actor, note or "Approved. Sent to vendor for confirmation.",
            )

    def request_changes(self, note: str = "", actor: Actor = Actor.APPROVER) -> Booking:
        """Pending approval -> Needs changes."""
        with self._lock:
            transition = self._require("request_changes")
            return self._commit(
                transition,
                actor=actor,
                at=self._now(),
                detail=note or "Approver requested changes.",
            )

    def revise(self, actor: Actor = Actor.REQUESTER) -> Booking:
        """Needs changes -> Draft."""
        with self._lock:
            transition = self._require("revise")
            self._admitting_decision = None
            return self._commit(
                transition,
                actor=actor,
                at=self._now(),
                detail="Booking reopened for editing.",
                approval_request_id=None,
            )

    def vendor_confirm(self, note: str = "") -> Booking:
        """Pending confirmation -> Confirmed (vendor signal)."""
        with self._lock:
            transition = self._require("vendor_confirm")
            return self._commit(
                transition,
                actor=Actor.VENDOR,
                at=self._now(),
                detail=note or "Vendor confirmed the booking.",
            )

    def start_service(self, note: str = "") -> Booking:
        """Confirmed -> In progress (vendor signal)."""
        with self._lock:
            transition = self._require("start_service")
            return self._commit(
                transition,
                actor=Actor.VENDOR,
                at=self._now(),
                detail=note or "Service delivery started.",
            )

    def complete(self, note: str = "") -> Booking:
        """Confirmed or In progress -> Completed (delivery signal)."""
        with self._lock:
            transition = self._require("complete")
            return self._commit(
                transition,
                actor=Actor.VENDOR,
                at=self._now(),
                detail=note or "Service delivered.",
            )

    def cancel(self, actor: Actor = Actor.REQUESTER, reason: str = "") -> Booking:
        """Cancel, then immediately move to Refund processing.

        Appends two timeline events, one per transition.
        """
        with self._lock:
            transition = self._require("cancel")
            now = self._now()
            self._commit(
                transition,
                actor=actor,
                at=now,
                detail=reason or "Booking cancelled.",
            )
            refund = self._require("begin_refund", system=True)
            return self._commit(
                refund,
                actor=Actor.SYSTEM,
                at=now,
                detail="Refund requested from payment processor.",
            )

    def settle_refund(self, result: SettlementResult | None) -> Booking:
        """Apply a settlement result to a booking in Refund processing.

        ``None`` means the processor has not confirmed yet.  That is logged
        and raised but not written to the timeline.  A failure is recorded
        once per distinct reason, so repeated polls do not grow the timeline.

        Raises:
            InvalidTransitionError: booking is not in Refund processing.
            RefundPendingError: confirmation pending or failed.
        """
        with self._lock:
            transition = self._require("settle_refund")
            booking = self._booking
            if result is None:
                logger.info(
                    "refund_awaiting_confirmation",
                    extra={"booking_id": booking.id},
                )
                raise RefundPendingError(booking.id, AWAITING_CONFIRMATION)
            if not result.succeeded:
                reason = result.failure_reason or "settlement failed"
                logger.warning(
                    "refund_attempt_failed",
                    extra={"booking_id": booking.id, "failure_reason": reason},
                )
                last = booking.timeline[-1]
                if not (last.title == REFUND_FAILED_TITLE and last.detail == reason):
                    self._booking = self._append_event(
                        booking,
                        title=REFUND_FAILED_TITLE,
                        detail=reason,
                        actor=Actor.SYSTEM,
                        at=self._now(),
                    )
                raise RefundPendingError(booking.id, reason)

            detail = "Refund settled."
            if result.reference:
                detail = f"Refund settled. Reference {result.reference}."
            return self._commit(
                transition,
                actor=Actor.SYSTEM,
                at=self._now(),
                detail=detail,
            )

    # ------------------------------------------------------------------
    # SLA monitoring
    # ------------------------------------------------------------------

    def check_sla(self, now: datetime) -> bool:
        """Poll the SLA tracker; breach and open a dispute if overdue.

        Dispute automation runs only on the breach transition itself, so a
        resolved breach dispute stays resolved under repeated polling.

        Returns:
            True if the booking is in SLA breached after the check.
        """
        with self._lock:
            booking = self._booking
            if booking.state is BookingState.SLA_BREACHED:
                return True
            if not is_breached(
                booking.state, booking.confirm_due_at, booking.delivery_due_at, now,
            ):
                return False

            transition = self._require("breach_sla", system=True)
            self._commit(
                transition,
                actor=Actor.SYSTEM,
                at=now,
                detail="Vendor missed the service level deadline.",
            )
            self._apply_breach_dispute(now)
            return True

    # ------------------------------------------------------------------
    # Disputes
    # ------------------------------------------------------------------

    def open_dispute(
        self,
        reason: str,
        note: str = "",
        attachment_ref: AttachmentRef | None = None,
        actor: Actor = Actor.REQUESTER,
    ) -> Dispute:
        """Open a manual dispute.  See ``DisputeAutomation.open_dispute``."""
        with self._lock:
            now = self._now()
            dispute = self._disputes.open_dispute(
                self._booking, reason, note, attachment_ref, now,
            )
            self._store_dispute(dispute, "Dispute opened", dispute.reason, actor, now)
            return dispute

    def start_dispute_review(self, dispute_id: str, actor: Actor = Actor.SYSTEM) -> Dispute:
        """Open -> In review."""
        with self._lock:
            dispute = self._disputes.start_review(self._booking, dispute_id)
            self._store_dispute(
                dispute, "Dispute in review", f"Dispute {dispute_id} under review.",
                actor, self._now(),
            )
            return dispute

    def resolve_dispute(
        self,
        dispute_id: str,
        note: str = "",
        actor: Actor = Actor.SYSTEM,
    ) -> Dispute:
        """In review -> Resolved."""
        with self._lock:
            dispute = self._disputes.resolve(self._booking, dispute_id)
            self._store_dispute(
                dispute, "Dispute resolved", note or f"Dispute {dispute_id} resolved.",
                actor, self._now(),
            )
            return dispute

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock.now()

    def _reject(self, action: str, detail: str = "") -> None:
        state = self._booking.state.value
        logger.warning(
            "booking_transition_rejected",
            extra={
                "trace_type": TRACE_TYPE_BOOKING_TRANSITION,
                "booking_id": self._booking.id,
                "from_state": state,
                "action": action,
                "reason": detail or "no_transition",
            },
        )
        raise InvalidTransitionError(state, action, detail)

    def _require(self, action: str, system: bool = False) -> Transition:
        transition = BOOKING_WORKFLOW.find(self._booking.state.value, action)
        if transition is None:
            self._reject(action)
        if transition.system_only and not system:
            self._reject(action, "system-only transition")
        return transition

    def _check_gate(
        self,
        transition: Transition,
        program: CorporateProgramState,
    ) -> PolicyDecision:
        decision = self.evaluate(program)
        required = _GUARD_OUTCOMES[transition.guard.name]
        if decision.outcome is not required:
            logger.warning(
                "booking_transition_rejected",
                extra={
                    "trace_type": TRACE_TYPE_BOOKING_TRANSITION,
                    "booking_id": self._booking.id,
                    "from_state": transition.from_state,
                    "action": transition.action,
                    "reason": "policy_gate",
                    "outcome": decision.outcome.value,
                    "required": required.value,
                },
            )
            raise PolicyGateError(
                transition.from_state,
                transition.action,
                decision.outcome.value,
                required.value,
            )
        return decision

    def _enter_pending_confirmation(
        self,
        transition: Transition,
        actor: Actor,
        detail: str,
    ) -> Booking:
        booking = self._booking
        now = self._now()
        updates: dict[str, Any] = {}
        if booking.confirm_due_at is None:
            vendor = self._config.catalog.get_vendor(booking.vendor_id)
            updates["confirm_due_at"], updates["delivery_due_at"] = (
                compute_due_dates(now, vendor)
            )
        committed = self._commit(transition, actor=actor, at=now, detail=detail, **updates)

        if committed.receipt is None:
            catalog = self._config.catalog
            decision = self._admitting_decision
            if decision is None:
                decision = PolicyDecision(outcome=Outcome.APPROVAL_REQUIRED, reasons=())
            receipt = generate_receipt(
                receipt_id=new_display_id("RCPT-SVC", now),
                booking=committed,
                service=catalog.get_service(committed.service_id),
                vendor=catalog.get_vendor(committed.vendor_id),
                decision=decision,
                org_name=self._config.organization.name,
                issued_at=now,
            )
            self._booking = dataclasses.replace(committed, receipt=receipt)
            logger.info(
                "receipt_generated",
                extra={
                    "booking_id": committed.id,
                    "receipt_id": receipt.receipt_id,
                    "content_hash": receipt.content_hash,
                },
            )
        return self._booking

    def _commit(
        self,
        transition: Transition,
        *,
        actor: Actor,
        at: datetime,
        detail: str,
        **updates: Any,
    ) -> Booking:
        start = time.monotonic()
        booking = self._booking
        to_state = BookingState(transition.to_state)
        moved = dataclasses.replace(booking, state=to_state, **updates)
        self._booking = self._append_event(
            moved, title=to_state.value, detail=detail, actor=actor, at=at,
        )
        with LogContext.bind(booking_id=booking.id, actor_id=actor.value):
            logger.info(
                "booking_transition",
                extra={
                    "trace_type": TRACE_TYPE_BOOKING_TRANSITION,
                    "workflow": BOOKING_WORKFLOW.name,
                    "action": transition.action,
                    "from_state": booking.state.value,
                    "to_state": to_state.value,
                    "actor": actor.value,
                    "duration_ms": round((time.monotonic() - start) * 1000, 3),
                },
            )
        return self._booking

    @staticmethod
    def _append_event(
        booking: Booking,
        *,
        title: str,
        detail: str,
        actor: Actor,
        at: datetime,
    ) -> Booking:
        # Timeline is ordered: never stamp earlier than the last event.
        if booking.timeline and at < booking.timeline[-1].timestamp:
            at = booking.timeline[-1].timestamp
        event = TimelineEvent(
            id=new_ordered_id(at),
            timestamp=at,
            title=title,
            detail=detail,
            actor=actor.value,
        )
        return dataclasses.replace(booking, timeline=booking.timeline + (event,))

    def _apply_breach_dispute(self, now: datetime) -> None:
        dispute = self._disputes.on_sla_breach(self._booking, now)
        if dispute is not None:
            self._store_dispute(dispute, "Dispute opened", dispute.reason, Actor.SYSTEM, now)

    def _store_dispute(
        self,
        dispute: Dispute,
        title: str,
        detail: str,
        actor: Actor,
        at: datetime,
    ) -> None:
        booking = self._booking
        disputes = tuple(d for d in booking.disputes if d.id != dispute.id)
        if len(disputes) == len(booking.disputes):
            disputes = booking.disputes + (dispute,)
        else:
            disputes = tuple(
                dispute if d.id == dispute.id else d for d in booking.disputes
            )
        self._booking = self._append_event(
            dataclasses.replace(booking, disputes=disputes),
            title=title,
            detail=detail,
            actor=actor,
            at=at,
        )
