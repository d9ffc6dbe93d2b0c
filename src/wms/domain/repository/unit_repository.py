"""Abstract repository for InventoryUnit aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from wms.domain.model.inventory import InventoryUnit


class UnitRepository(ABC):

    @abstractmethod
    def get_by_id(self, unit_id: int) -> InventoryUnit | None:
        """Return a unit by its ID, or None."""

    @abstractmethod
    def get_by_serial(self, serial: str) -> InventoryUnit | None:
        """Return a unit by its serial, or None."""

    @abstractmethod
    def existing_serials(self, serials: Iterable[str]) -> set[str]:
        """Return the subset of *serials* already used by stored units."""

    @abstractmethod
    def list_by_manifest(self, manifest_id: int) -> list[InventoryUnit]:
        """Return the units admitted by a manifest, in admission order."""

    @abstractmethod
    def list_eligible(self, product_sku: str) -> list[InventoryUnit]:
        """Return allocatable units of a product, oldest admitted first."""

    @abstractmethod
    def any_for_product(self, product_sku: str) -> bool:
        """True if any unit references the product."""

    @abstractmethod
    def any_at_location(self, location_id: int) -> bool:
        """True if any unit currently sits at the location."""

    @abstractmethod
    def save(self, unit: InventoryUnit) -> None:
        """Persist a new or updated unit, assigning an ID if new."""

    @abstractmethod
    def delete(self, unit_id: int) -> None:
        """Remove a unit. Only manifest deletion does this."""
