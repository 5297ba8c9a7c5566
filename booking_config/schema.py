"""
BookingConfiguration schema.

Defines the typed form of a booking configuration set.  YAML files are
parsed into these types by the loader, checked by the validator, and
handed to services as a single frozen ``BookingConfiguration``.
"""

from __future__ import annotations

from dataclasses import dataclass

from booking_config.catalog import Catalog


@dataclass(frozen=True)
class OrganizationDef:
    """The organization whose CorporatePay program funds bookings."""

    name: str
    currency: str


@dataclass(frozen=True)
class EngineSettings:
    """Behavioral switches for the booking engine."""

    auto_dispute_enabled: bool = True
    notes_min_length: int = 10

    def __post_init__(self) -> None:
        if self.notes_min_length < 0:
            raise ValueError("notes_min_length cannot be negative")


@dataclass(frozen=True)
class BookingConfiguration:
    """Runtime configuration: organization, settings and catalog.

    ``checksum`` is the SHA-256 of the canonical source document and
    identifies the exact configuration a booking ran under.
    """

    config_id: str
    version: int
    organization: OrganizationDef
    settings: EngineSettings
    catalog: Catalog
    cost_centers: tuple[str, ...] = ()
    purpose_tags: tuple[str, ...] = ()
    checksum: str = ""
