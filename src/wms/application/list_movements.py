"""Application service: List Movements use case (query).

Returns a unit's movement trail as a restartable sequence: nothing is
read until the caller iterates, and each pass reads the ledger afresh.
"""

from __future__ import annotations

from collections.abc import Iterator

from wms.application.dto import MovementDTO
from wms.application.query import Restartable
from wms.domain.exceptions import UnitNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class ListMovementsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, unit_id: int) -> Restartable[MovementDTO]:
        with self._uow_factory() as uow:
            if uow.units.get_by_id(unit_id) is None:
                raise UnitNotFound(unit_id)

        def trail() -> Iterator[MovementDTO]:
            with self._uow_factory() as uow:
                for record in uow.movements.iter_for_unit(unit_id):
                    yield MovementDTO.from_domain(record)

        return Restartable(trail)
