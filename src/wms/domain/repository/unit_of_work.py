"""Abstract Unit of Work: the transaction boundary for every use case.

A handler opens one unit of work, reads and writes through its
repositories, locks the unit rows it is about to mutate, and commits.
Leaving the ``with`` block without committing rolls everything back, so
an exception anywhere in a use case leaves no partial mutation behind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from wms.domain.model.inventory import InventoryUnit
from wms.domain.repository.location_repository import LocationRepository
from wms.domain.repository.manifest_repository import ManifestRepository
from wms.domain.repository.movement_repository import MovementRepository
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.repository.product_repository import ProductRepository
from wms.domain.repository.unit_repository import UnitRepository


class AbstractUnitOfWork(ABC):

    products: ProductRepository
    locations: LocationRepository
    units: UnitRepository
    manifests: ManifestRepository
    orders: OrderRepository
    movements: MovementRepository

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *exc: object) -> None:
        self.rollback()

    @abstractmethod
    def lock_units(self, units: Iterable[InventoryUnit]) -> dict[int, InventoryUnit]:
        """Lock unit rows in canonical (serial) order and re-read them.

        Returns the freshly read units keyed by ID; a unit deleted in the
        meantime is missing from the result. Locks are held until the
        unit of work commits or rolls back. Raises Contention when the
        locks cannot be obtained within the retry budget.
        """

    @abstractmethod
    def commit(self) -> None:
        """Atomically apply every pending write."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard pending writes and release locks."""


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
