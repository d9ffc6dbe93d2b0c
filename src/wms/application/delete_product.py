"""Application service: Delete Product use case."""

from __future__ import annotations

from wms.domain.exceptions import ProductNotFound, ReferencedEntity
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class DeleteProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, sku: str) -> None:
        """Remove a product; refused while any unit still references it."""
        with self._uow_factory() as uow:
            if uow.products.get_by_sku(sku) is None:
                raise ProductNotFound(sku)
            if uow.units.any_for_product(sku):
                raise ReferencedEntity("product", sku, "inventory units still reference it")
            uow.products.delete(sku)
            uow.commit()
