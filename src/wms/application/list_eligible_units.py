"""Application service: List Eligible Units use case (query).

Eligible units are the ones an allocation could take right now:
available, sitting in a location, and (for Measured products) with stock
left. They come oldest-admitted first so pickers follow FIFO.
"""

from __future__ import annotations

from collections.abc import Iterator

from wms.application.dto import EligibleUnitDTO
from wms.application.query import Restartable
from wms.domain.exceptions import ProductNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class ListEligibleUnitsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_sku: str) -> Restartable[EligibleUnitDTO]:
        product_sku = (product_sku or "").strip()
        with self._uow_factory() as uow:
            if uow.products.get_by_sku(product_sku) is None:
                raise ProductNotFound(product_sku)

        def eligible() -> Iterator[EligibleUnitDTO]:
            with self._uow_factory() as uow:
                units = uow.units.list_eligible(product_sku)
            for unit in units:
                yield EligibleUnitDTO(
                    unit_id=unit.id,  # type: ignore[arg-type]
                    serial=unit.serial,
                    remaining_quantity=(
                        str(unit.remaining_quantity) if unit.is_measured else None
                    ),
                    admitted_at=unit.admitted_at,
                )

        return Restartable(eligible)
