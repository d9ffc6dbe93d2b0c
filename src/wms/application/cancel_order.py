"""Application service: Cancel Order use case.

Cancellation reverses every line of an order: depleted units come back
(without a location, so they must be put away again) and partial cuts
are returned to the unit they came from.

Reversal is only mechanical when nothing happened to the stock since
dispatch. If any line shows downstream effects (a unit retired, moved,
or consumed by another order) nothing is reversed: the order is flagged
for manual review, that flag is committed, and ManualReviewRequired is
raised to the caller.
"""

from __future__ import annotations

from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import ManualReviewRequired, OrderNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.domain.service.allocation_service import AllocationService
from wms.logging_config import get_logger

logger = get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(self, order_id: int, actor: str | None = None) -> None:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            order.ensure_cancellable()

            current = [uow.units.get_by_id(line.unit_id) for line in order.lines]
            units = uow.lock_units(u for u in current if u is not None)

            # A concurrent cancel may have won the locks
            order = uow.orders.get_by_id(order_id)
            order.ensure_cancellable()

            service = AllocationService(uow.units, uow.movements)
            problems = service.downstream_effects(order, units)
            if problems:
                order.flag_for_review(problems)
                uow.orders.save(order)
                uow.commit()
                logger.warning(
                    "Order flagged for manual review",
                    extra={"order_id": order_id, "reasons": problems, "actor": actor},
                )
                raise ManualReviewRequired(order_id, problems)

            service.release(order, units, self._clock.now(), actor)
            order.cancel()
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order cancelled",
            extra={"order_id": order_id, "lines": len(order.lines), "actor": actor},
        )
