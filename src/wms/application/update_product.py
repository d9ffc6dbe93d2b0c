"""Application service: Update Product use case.

The SKU and unit kind are immutable; everything else can change
without touching units already admitted for the product.
"""

from __future__ import annotations

from decimal import Decimal

from wms.domain.exceptions import ProductNotFound
from wms.domain.model.product import Product
from wms.domain.model.value_objects import Measure
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class UpdateProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        sku: str,
        name: str | None = None,
        default_quantity: str | Decimal | None = None,
        is_active: bool | None = None,
    ) -> Product:
        with self._uow_factory() as uow:
            product = uow.products.get_by_sku(sku)
            if product is None:
                raise ProductNotFound(sku)

            if name is not None:
                product.rename(name)
            if default_quantity is not None:
                product.set_default_quantity(Measure.positive(default_quantity))
            if is_active is not None:
                product.is_active = is_active

            uow.products.save(product)
            uow.commit()
        return product
