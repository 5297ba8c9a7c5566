"""
booking_engines.pricing -- Booking amount estimation.

Responsibility:
    Derive the amount a booking will be charged from the catalog base price
    and who is booking for whom, and render amounts for reason text.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic; results are rounded to whole currency units
      with ROUND_HALF_UP.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from booking_kernel.domain.catalog import (
    Beneficiary,
    BeneficiaryType,
    Role,
    ServiceCategory,
    ServiceDefinition,
    ServiceModule,
)

# Coordinator surcharge when booking on behalf of someone else.
BOOK_FOR_OTHERS_MULTIPLIER = Decimal("1.05")
# Dispatch surcharge for medical home visits.
HOME_VISIT_MULTIPLIER = Decimal("1.10")


def estimate_amount(
    service: ServiceDefinition,
    role: Role,
    beneficiary: Beneficiary,
) -> Decimal:
    """Estimate the charge for booking ``service`` for ``beneficiary``.

    Args:
        service: Catalog service definition.
        role: Role of the person making the booking.
        beneficiary: Who receives the service.

    Returns:
        Amount in whole currency units.
    """
    amount = service.base_price
    if role is Role.COORDINATOR and beneficiary.type is not BeneficiaryType.SELF:
        amount *= BOOK_FOR_OTHERS_MULTIPLIER
    if (
        service.module is ServiceModule.MEDICAL
        and service.category is ServiceCategory.HOME_VISIT
    ):
        amount *= HOME_VISIT_MULTIPLIER
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, currency: str) -> str:
    """Render ``Decimal("200000")`` as ``"UGX 200,000"``."""
    whole = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{currency} {whole:,}"
