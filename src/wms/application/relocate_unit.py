"""Application service: Relocate Unit use case."""

from __future__ import annotations

from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import LocationNotFound, UnitNotFound
from wms.domain.model.movement import RELOCATION, MovementRecord
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class RelocateUnitHandler:
    """Move an available, placed unit to another location.

    The status does not change; the move is recorded in the movement
    ledger with the caller's reason, or ``"relocation"`` when none is given.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(
        self,
        unit_id: int,
        new_location_id: int,
        reason: str | None = None,
        actor: str | None = None,
    ) -> None:
        with self._uow_factory() as uow:
            unit = uow.units.get_by_id(unit_id)
            if unit is None:
                raise UnitNotFound(unit_id)
            unit = uow.lock_units([unit]).get(unit_id)
            if unit is None:
                raise UnitNotFound(unit_id)

            if uow.locations.get_by_id(new_location_id) is None:
                raise LocationNotFound(new_location_id)

            previous = unit.relocate(new_location_id)
            uow.units.save(unit)
            uow.movements.append(
                MovementRecord(
                    id=None,
                    unit_id=unit.id,
                    from_location_id=previous,
                    to_location_id=new_location_id,
                    reason=(reason or "").strip() or RELOCATION,
                    actor=actor,
                    recorded_at=self._clock.now(),
                )
            )
            uow.commit()

        logger.info(
            "Unit relocated",
            extra={"unit_id": unit_id, "from": previous, "to": new_location_id, "actor": actor},
        )
