"""
Configuration Loader (``booking_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses it into typed
``booking_config.schema`` / ``booking_kernel.domain.catalog`` instances.
Runtime callers use ``booking_config.get_active_config()`` rather than this
module directly.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* Amounts are parsed to ``Decimal`` via ``str`` so YAML floats never leak
  binary rounding into prices.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown enum values  -> ``ValueError`` from the enum constructor.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from booking_config.catalog import Catalog
from booking_config.schema import (
    BookingConfiguration,
    EngineSettings,
    OrganizationDef,
)
from booking_kernel.domain.catalog import (
    Beneficiary,
    BeneficiaryType,
    ServiceCategory,
    ServiceDefinition,
    ServiceModule,
    Vendor,
    VendorStatus,
)
from booking_kernel.utils.hashing import hash_payload


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_amount(value: Any) -> Decimal:
    """Parse a money amount from YAML (int, float or string)."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Cannot parse amount from {value!r}") from None


def parse_vendor(data: dict[str, Any]) -> Vendor:
    """
    Parse a ``Vendor`` from a dict.

    Raises:
        KeyError: if ``id``, ``name``, ``status`` or an SLA key is missing.
        ValueError: if ``status`` is not a known vendor status.
    """
    return Vendor(
        id=data["id"],
        name=data["name"],
        status=VendorStatus(data["status"]),
        confirm_sla_minutes=int(data["confirm_sla_minutes"]),
        delivery_sla_hours=int(data["delivery_sla_hours"]),
        notes=data.get("notes", ""),
    )


def parse_service(data: dict[str, Any]) -> ServiceDefinition:
    """
    Parse a ``ServiceDefinition`` from a dict.

    Raises:
        KeyError: if required keys are missing.
        ValueError: if module/category are unknown or amounts malformed.
    """
    return ServiceDefinition(
        id=data["id"],
        module=ServiceModule(data["module"]),
        category=ServiceCategory(data["category"]),
        title=data["title"],
        vendor_id=data["vendor_id"],
        base_price=parse_amount(data["base_price"]),
        approval_threshold=parse_amount(data["approval_threshold"]),
        location_hint=data.get("location_hint", ""),
        required_attachments=tuple(data.get("required_attachments", ())),
        purpose_required=bool(data.get("purpose_required", False)),
        notes_required=bool(data.get("notes_required", False)),
        cancellation_policy=data.get("cancellation_policy", ""),
        refund_policy=data.get("refund_policy", ""),
    )


def parse_beneficiary(data: dict[str, Any]) -> Beneficiary:
    """Parse a Beneficiary from a dict."""
    return Beneficiary(
        id=data["id"],
        name=data["name"],
        type=BeneficiaryType(data["type"]),
        group=data.get("group", ""),
        phone=data.get("phone", ""),
        default_cost_center=data.get("default_cost_center", ""),
    )


def parse_settings(data: dict[str, Any]) -> EngineSettings:
    """Parse EngineSettings; every key is optional."""
    return EngineSettings(
        auto_dispute_enabled=bool(data.get("auto_dispute_enabled", True)),
        notes_min_length=int(data.get("notes_min_length", 10)),
    )


def parse_configuration(data: dict[str, Any]) -> BookingConfiguration:
    """
    Parse a full ``BookingConfiguration`` from a loaded YAML document.

    Raises:
        KeyError: if ``config_id`` or ``organization`` is missing.
    """
    org = data["organization"]
    catalog_data = data.get("catalog", {})
    catalog = Catalog(
        vendors=tuple(parse_vendor(v) for v in catalog_data.get("vendors", [])),
        services=tuple(parse_service(s) for s in catalog_data.get("services", [])),
        beneficiaries=tuple(
            parse_beneficiary(b) for b in catalog_data.get("beneficiaries", [])
        ),
    )
    return BookingConfiguration(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        organization=OrganizationDef(name=org["name"], currency=org["currency"]),
        settings=parse_settings(data.get("settings", {})),
        catalog=catalog,
        cost_centers=tuple(data.get("cost_centers", ())),
        purpose_tags=tuple(data.get("purpose_tags", ())),
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> BookingConfiguration:
    """Load and parse a configuration set file."""
    return parse_configuration(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of the canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    return hash_payload(data)
