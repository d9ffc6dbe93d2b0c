"""Application service: order queries."""

from __future__ import annotations

from wms.application.dto import OrderDTO
from wms.domain.exceptions import OrderNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class ShowOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return OrderDTO.from_domain(order)


class ListOrdersHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[OrderDTO]:
        with self._uow_factory() as uow:
            return [OrderDTO.from_domain(o) for o in uow.orders.list_all()]
