"""Application service: Allocate Order use case.

Allocation picks specific units for a customer and dispatches them in a
single transaction:

1. Validate the request (customer, at least one line, no unit twice).
2. Load every unit, then lock them all in serial order and re-read them,
   so two orders racing for the same stock are serialized.
3. Let the allocation service validate every line before touching any
   unit; one bad line rejects the whole order.
4. Create the Order and commit units, order and movements together.
"""

from __future__ import annotations

from collections import Counter

from wms.application.dto import AllocationLineSpec
from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import UnitNotFound, ValidationError
from wms.domain.model.order import Order
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.domain.service.allocation_service import AllocationService
from wms.logging_config import get_logger

logger = get_logger(__name__)


class AllocateOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(
        self,
        customer_id: str,
        lines: list[AllocationLineSpec],
        notes: str | None = None,
        actor: str | None = None,
    ) -> int:
        """Allocate the requested units and return the new order's ID."""
        if not customer_id or not str(customer_id).strip():
            raise ValidationError("Customer is required")
        if not lines:
            raise ValidationError("Order must contain at least one line")

        repeated = sorted(i for i, n in Counter(line.unit_id for line in lines).items() if n > 1)
        if repeated:
            raise ValidationError(
                f"Units listed more than once: {', '.join(str(i) for i in repeated)}"
            )

        with self._uow_factory() as uow:
            units = []
            for line in lines:
                unit = uow.units.get_by_id(line.unit_id)
                if unit is None:
                    raise UnitNotFound(line.unit_id)
                units.append(unit)

            locked = uow.lock_units(units)
            requests = []
            for line in lines:
                unit = locked.get(line.unit_id)
                if unit is None:
                    raise UnitNotFound(line.unit_id)
                requests.append((unit, unit.requested_quantity(line.quantity)))

            now = self._clock.now()
            service = AllocationService(uow.units, uow.movements)
            order_lines = service.allocate(requests, now, actor)

            order = Order.create(customer_id, order_lines, created_at=now, notes=notes)
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order allocated",
            extra={
                "order_id": order.id,
                "customer_id": order.customer_id,
                "lines": len(order.lines),
                "dispatched": sum(1 for line in order.lines if line.depleted),
                "actor": actor,
            },
        )
        return order.id  # type: ignore[return-value]
