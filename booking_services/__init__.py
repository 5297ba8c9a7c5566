"""
booking_services -- Stateful coordination over the pure booking engines.

``BookingLifecycleManager`` owns a booking and executes its transitions;
``DisputeAutomation`` and the settlement boundary plug into it.
"""

from booking_services.disputes import DISPUTE_WORKFLOW, DisputeAutomation
from booking_services.lifecycle import BOOKING_WORKFLOW, BookingLifecycleManager
from booking_services.settlement import (
    SettlementProcessor,
    SettlementResult,
    process_refund,
)

__all__ = [
    "BOOKING_WORKFLOW",
    "DISPUTE_WORKFLOW",
    "BookingLifecycleManager",
    "DisputeAutomation",
    "SettlementProcessor",
    "SettlementResult",
    "process_refund",
]
