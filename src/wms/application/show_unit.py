"""Application service: Show Unit use case (query)."""

from __future__ import annotations

from wms.application.dto import UnitDTO
from wms.domain.exceptions import UnitNotFound
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class ShowUnitHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, unit_id: int | None = None, serial: str | None = None) -> UnitDTO:
        """Look a unit up by ID or, when no ID is given, by serial."""
        with self._uow_factory() as uow:
            if unit_id is not None:
                unit = uow.units.get_by_id(unit_id)
                key: object = unit_id
            else:
                key = (serial or "").strip()
                unit = uow.units.get_by_serial(key)  # type: ignore[arg-type]
        if unit is None:
            raise UnitNotFound(key)
        return UnitDTO.from_domain(unit)
