"""Application service: Complete Order use case."""

from __future__ import annotations

from wms.domain.exceptions import OrderNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class CompleteOrderHandler:
    """Mark a processing order as completed once its shipment has left.

    The order's units are locked so completion cannot interleave with a
    cancellation of the same order.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int) -> None:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            current = [uow.units.get_by_id(line.unit_id) for line in order.lines]
            uow.lock_units(u for u in current if u is not None)

            order = uow.orders.get_by_id(order_id)
            order.complete()
            uow.orders.save(order)
            uow.commit()

        logger.info("Order completed", extra={"order_id": order_id})
