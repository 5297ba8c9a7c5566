"""
booking_config -- single public entrypoint for booking configuration.

Responsibility:
    Provides the runtime way to obtain configuration through
    ``get_active_config()``.  Returns a frozen ``BookingConfiguration``
    holding the organization, engine settings and the service catalog.

Architecture position:
    Configuration -- YAML-driven.  Sits beside ``booking_engines`` and
    below ``booking_services``.  Engines MUST NEVER import from here.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested name.
    - ``ValueError`` -- schema or cross-reference validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``BOOKING_CONFIG_TRACE`` log entry with the config id, version,
    checksum and catalog sizes.
"""

from __future__ import annotations

from pathlib import Path

from booking_config.catalog import Catalog
from booking_config.loader import load_configuration
from booking_config.schema import (
    BookingConfiguration,
    EngineSettings,
    OrganizationDef,
)
from booking_config.validator import ConfigValidationResult, validate_configuration
from booking_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
) -> BookingConfiguration:
    """Load, validate and return the named configuration set.

    Args:
        name: Configuration set name; resolves to ``<config_dir>/<name>.yaml``.
        config_dir: Override path to configuration sets directory.
            Defaults to booking_config/sets/.

    Raises:
        FileNotFoundError: If the configuration set does not exist.
        ValueError: If configuration validation fails.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    config = load_configuration(sets_dir / f"{name}.yaml")

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )
    for warning in validation.warnings:
        _logger.warning("config_validation_warning", extra={"warning": warning})

    _logger.info(
        "BOOKING_CONFIG_TRACE",
        extra={
            "trace_type": "BOOKING_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "vendor_count": len(config.catalog.vendors),
            "service_count": len(config.catalog.services),
            "beneficiary_count": len(config.catalog.beneficiaries),
        },
    )
    return config


__all__ = [
    "BookingConfiguration",
    "Catalog",
    "ConfigValidationResult",
    "EngineSettings",
    "OrganizationDef",
    "get_active_config",
    "validate_configuration",
]
