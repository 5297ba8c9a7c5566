"""
Configuration Validator (``booking_config.validator``).

Responsibility
--------------
Checks a parsed ``BookingConfiguration`` for structural integrity before it
is handed to services.

Invariants enforced
-------------------
* Vendor, service and beneficiary ids are unique.
* Every service references a declared vendor.
* Beneficiary default cost centers are declared cost centers (warning).
* A currency code is present.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from booking_config.schema import BookingConfiguration


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.  Warnings do
    not block loading but should be reviewed.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _duplicates(ids: list[str]) -> list[str]:
    return sorted(k for k, n in Counter(ids).items() if n > 1)


def validate_configuration(config: BookingConfiguration) -> ConfigValidationResult:
    """Validate ids, cross-references and organization settings."""
    result = ConfigValidationResult()
    catalog = config.catalog

    if not config.organization.currency.strip():
        result.errors.append("organization.currency is empty")

    for kind, ids in (
        ("vendor", [v.id for v in catalog.vendors]),
        ("service", [s.id for s in catalog.services]),
        ("beneficiary", [b.id for b in catalog.beneficiaries]),
    ):
        for dup in _duplicates(ids):
            result.errors.append(f"Duplicate {kind} id: {dup}")

    vendor_ids = {v.id for v in catalog.vendors}
    for service in catalog.services:
        if service.vendor_id not in vendor_ids:
            result.errors.append(
                f"Service {service.id} references unknown vendor {service.vendor_id}"
            )

    if config.cost_centers:
        known = set(config.cost_centers)
        for b in catalog.beneficiaries:
            if b.default_cost_center and b.default_cost_center not in known:
                result.warnings.append(
                    f"Beneficiary {b.id} default cost center "
                    f"{b.default_cost_center} is not a declared cost center"
                )

    return result
