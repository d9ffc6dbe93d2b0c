"""Application service: Place Unit use case.

Verification and placement happen in one step: a quarantined unit is
scanned into a storage location and becomes available for allocation.
A unit handed back by an order cancellation (available, no location) is
put away again through the same operation.
"""

from __future__ import annotations

from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import LocationNotFound, UnitNotFound
from wms.domain.model.movement import PLACEMENT, MovementRecord
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class PlaceUnitHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(self, serial: str, location_code: str, actor: str | None = None) -> int:
        """Place the unit and return its ID."""
        serial = (serial or "").strip()
        location_code = (location_code or "").strip()

        with self._uow_factory() as uow:
            unit = uow.units.get_by_serial(serial)
            if unit is None:
                raise UnitNotFound(serial)

            # Whoever got the lock first may have placed it already
            unit = uow.lock_units([unit]).get(unit.id)
            if unit is None:
                raise UnitNotFound(serial)
            unit.ensure_placeable()

            location = uow.locations.get_by_scan_code(location_code)
            if location is None:
                raise LocationNotFound(location_code)

            now = self._clock.now()
            unit.place(location.id, now)
            uow.units.save(unit)
            uow.movements.append(
                MovementRecord(
                    id=None,
                    unit_id=unit.id,
                    from_location_id=None,
                    to_location_id=location.id,
                    reason=PLACEMENT,
                    actor=actor,
                    recorded_at=now,
                )
            )
            uow.commit()

        logger.info(
            "Unit placed",
            extra={"serial": unit.serial, "location": str(location.coordinate), "actor": actor},
        )
        return unit.id  # type: ignore[return-value]
