"""Application service: Retire Unit use case.

Writes an available unit off (damaged, lost, expired). Retirement is
terminal: the unit leaves its location and can never be allocated again.
"""

from __future__ import annotations

from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import UnitNotFound
from wms.domain.model.movement import RETIREMENT, MovementRecord
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class RetireUnitHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(self, unit_id: int, reason: str | None = None, actor: str | None = None) -> None:
        reason = (reason or "").strip()

        with self._uow_factory() as uow:
            unit = uow.units.get_by_id(unit_id)
            if unit is None:
                raise UnitNotFound(unit_id)
            unit = uow.lock_units([unit]).get(unit_id)
            if unit is None:
                raise UnitNotFound(unit_id)

            now = self._clock.now()
            previous = unit.retire(now)
            uow.units.save(unit)
            uow.movements.append(
                MovementRecord(
                    id=None,
                    unit_id=unit.id,
                    from_location_id=previous,
                    to_location_id=None,
                    reason=f"{RETIREMENT}: {reason}" if reason else RETIREMENT,
                    actor=actor,
                    recorded_at=now,
                )
            )
            uow.commit()

        logger.info("Unit retired", extra={"unit_id": unit_id, "reason": reason, "actor": actor})
