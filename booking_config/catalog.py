"""
In-memory catalog provider (``booking_config.catalog``).

Read-only lookups over vendors, services and beneficiaries.  Lookups by an
unknown id raise ``ReferenceNotFoundError``; that is the only way malformed
input reaches the engine as an exception.
"""

from __future__ import annotations

from dataclasses import dataclass

from booking_kernel.domain.catalog import (
    Beneficiary,
    ServiceDefinition,
    ServiceModule,
    Vendor,
)
from booking_kernel.exceptions import ReferenceNotFoundError


@dataclass(frozen=True)
class Catalog:
    vendors: tuple[Vendor, ...] = ()
    services: tuple[ServiceDefinition, ...] = ()
    beneficiaries: tuple[Beneficiary, ...] = ()

    def get_vendor(self, vendor_id: str) -> Vendor:
        for vendor in self.vendors:
            if vendor.id == vendor_id:
                return vendor
        raise ReferenceNotFoundError("vendor", vendor_id)

    def get_service(self, service_id: str) -> ServiceDefinition:
        for service in self.services:
            if service.id == service_id:
                return service
        raise ReferenceNotFoundError("service", service_id)

    def get_beneficiary(self, beneficiary_id: str) -> Beneficiary:
        for beneficiary in self.beneficiaries:
            if beneficiary.id == beneficiary_id:
                return beneficiary
        raise ReferenceNotFoundError("beneficiary", beneficiary_id)

    def vendor_for(self, service: ServiceDefinition) -> Vendor:
        """The vendor that fulfils ``service``."""
        return self.get_vendor(service.vendor_id)

    def services_in(self, module: ServiceModule) -> tuple[ServiceDefinition, ...]:
        return tuple(s for s in self.services if s.module is module)
