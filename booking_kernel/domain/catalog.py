"""
Catalog domain types (``booking_kernel.domain.catalog``).

The nouns the booking engine reads but never owns: services, vendors,
beneficiaries and attachment descriptors.  Catalog records are supplied by
an external provider (see ``booking_config.catalog``) and are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ServiceModule(str, Enum):
    """Product area a bookable service belongs to."""

    MEDICAL = "Medical & Health Care"
    TRAVEL = "Travel & Tourism"
    SCHOOL = "School & E-Learning"
    WORKSPACE = "Virtual Workspace"
    FAITH = "FaithHub"
    FINANCE = "Finance & Payments"
    OTHER = "Other Service Module"


class ServiceCategory(str, Enum):
    APPOINTMENT = "Appointment"
    HOME_VISIT = "Home Visit"
    TRAVEL_BOOKING = "Travel Booking"
    TRAINING = "Training"
    WORKSPACE_BOOKING = "Workspace Booking"
    CONSULTATION = "Consultation"
    OTHER = "Other"


class VendorStatus(str, Enum):
    """Organizational standing of a vendor."""

    PREFERRED = "Preferred"
    APPROVED = "Approved"
    RESTRICTED = "Restricted"


class BeneficiaryType(str, Enum):
    SELF = "Self"
    EMPLOYEE = "Employee"
    VISITOR = "Visitor"


class Role(str, Enum):
    """Role of the person driving the checkout."""

    EMPLOYEE = "Employee"
    COORDINATOR = "Coordinator"


@dataclass(frozen=True)
class Vendor:
    """A service provider with committed confirmation and delivery SLAs."""

    id: str
    name: str
    status: VendorStatus
    confirm_sla_minutes: int
    delivery_sla_hours: int
    notes: str = ""

    def __post_init__(self) -> None:
        if self.confirm_sla_minutes <= 0:
            raise ValueError(f"Vendor {self.id}: confirm_sla_minutes must be positive")
        if self.delivery_sla_hours <= 0:
            raise ValueError(f"Vendor {self.id}: delivery_sla_hours must be positive")


@dataclass(frozen=True)
class ServiceDefinition:
    """A bookable service and the policy requirements attached to it."""

    id: str
    module: ServiceModule
    category: ServiceCategory
    title: str
    vendor_id: str
    base_price: Decimal
    approval_threshold: Decimal
    location_hint: str = ""
    required_attachments: tuple[str, ...] = ()
    purpose_required: bool = False
    notes_required: bool = False
    cancellation_policy: str = ""
    refund_policy: str = ""

    def __post_init__(self) -> None:
        if self.base_price < 0:
            raise ValueError(f"Service {self.id}: base_price cannot be negative")
        if self.approval_threshold < 0:
            raise ValueError(f"Service {self.id}: approval_threshold cannot be negative")


@dataclass(frozen=True)
class Beneficiary:
    """The person the service is booked for."""

    id: str
    name: str
    type: BeneficiaryType
    group: str = ""
    phone: str = ""
    default_cost_center: str = ""

    @property
    def descriptor(self) -> str:
        return f"{self.name} ({self.type.value})"


@dataclass(frozen=True)
class AttachmentRef:
    """Minimal descriptor of an uploaded supporting document."""

    id: str
    name: str
    size: int = 0
    content_type: str = "unknown"
