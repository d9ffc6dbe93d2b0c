"""Application service: catalog queries."""

from __future__ import annotations

from wms.domain.model.location import Location
from wms.domain.model.product import Product
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class ListProductsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, active_only: bool = False) -> list[Product]:
        with self._uow_factory() as uow:
            products = uow.products.list_all()
        if active_only:
            products = [p for p in products if p.is_active]
        return products


class ListLocationsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[Location]:
        with self._uow_factory() as uow:
            return uow.locations.list_all()
