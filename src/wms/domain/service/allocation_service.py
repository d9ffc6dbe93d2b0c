"""Domain service: Allocation.

This service coordinates the cross-aggregate work of taking stock from
inventory units for an order, and of giving it back when the order is
cancelled.  It lives in the domain layer because the rules are core
business rules, not just orchestration.

The two-phase approach (validate-then-mutate) ensures we never leave
units in a half-allocated state if one line fails validation.  Callers
must hand in units that are already locked by the unit of work.
"""

from __future__ import annotations

from datetime import datetime

from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.movement import DISPATCH, DISPATCH_CANCELLED, MovementRecord
from wms.domain.model.order import Order, OrderLine
from wms.domain.model.status import UnitStatus
from wms.domain.model.value_objects import Measure
from wms.domain.repository.movement_repository import MovementRepository
from wms.domain.repository.unit_repository import UnitRepository


class AllocationService:

    def __init__(self, unit_repo: UnitRepository, movement_repo: MovementRepository) -> None:
        self._unit_repo = unit_repo
        self._movement_repo = movement_repo

    def allocate(
        self,
        requests: list[tuple[InventoryUnit, Measure | None]],
        at: datetime,
        actor: str | None = None,
    ) -> list[OrderLine]:
        """Take stock for every request and return the resulting order lines.

        Uses a two-phase approach:
          Phase 1: validate: every unit must be allocatable for the
                    requested quantity.  Fails fast before any mutation.
          Phase 2: mutate and persist: call ``take()`` on each unit,
                    save it, and log a dispatch movement for every unit
                    that left the warehouse entirely.
        """
        # Phase 1: validate everything
        for unit, quantity in requests:
            unit.check_allocatable(quantity)

        # Phase 2: mutate and persist
        lines: list[OrderLine] = []
        for unit, quantity in requests:
            location_id = unit.location_id
            depleted = unit.take(quantity, at)
            self._unit_repo.save(unit)
            if depleted:
                self._movement_repo.append(
                    MovementRecord(
                        id=None,
                        unit_id=unit.id,
                        from_location_id=location_id,
                        to_location_id=None,
                        reason=DISPATCH,
                        actor=actor,
                        recorded_at=at,
                    )
                )
            lines.append(
                OrderLine(
                    unit_id=unit.id,
                    serial=unit.serial,
                    product_sku=unit.product_sku,
                    quantity=quantity if unit.is_measured else None,
                    depleted=depleted,
                    location_id=location_id,
                )
            )
        return lines

    @staticmethod
    def downstream_effects(order: Order, units: dict[int, InventoryUnit]) -> list[str]:
        """List what happened to the order's stock since it was dispatched.

        An empty list means every line can be reversed mechanically.
        """
        problems: list[str] = []
        for line in order.lines:
            unit = units.get(line.unit_id)
            if unit is None:
                problems.append(f"unit {line.serial} no longer exists")
            elif unit.status is UnitStatus.RETIRED:
                problems.append(f"unit {line.serial} was retired")
            elif line.depleted and unit.status is not UnitStatus.DISPATCHED:
                problems.append(
                    f"unit {line.serial} is no longer dispatched (status={unit.status.value})"
                )
            elif not line.depleted and unit.status is not UnitStatus.AVAILABLE:
                problems.append(
                    f"unit {line.serial} was since {unit.status.value.lower()} by another operation"
                )
            elif not line.depleted and unit.location_id != line.location_id:
                problems.append(f"unit {line.serial} was moved after dispatch")
        return problems

    def release(
        self,
        order: Order,
        units: dict[int, InventoryUnit],
        at: datetime,
        actor: str | None = None,
    ) -> None:
        """Give every line's stock back to its unit.

        ``downstream_effects`` must have come back empty first.
        """
        for line in order.lines:
            unit = units[line.unit_id]
            unit.restore(line.quantity, line.depleted)
            self._unit_repo.save(unit)
            if line.depleted:
                self._movement_repo.append(
                    MovementRecord(
                        id=None,
                        unit_id=unit.id,
                        from_location_id=None,
                        to_location_id=None,
                        reason=DISPATCH_CANCELLED,
                        actor=actor,
                        recorded_at=at,
                    )
                )
