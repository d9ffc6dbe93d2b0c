"""Application service: Add Location use case."""

from __future__ import annotations

from wms.domain.exceptions import ValidationError
from wms.domain.model.location import Location
from wms.domain.model.value_objects import Coordinate
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class AddLocationHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        aisle: str,
        rack: str,
        level: str,
        position: str,
        scan_code: str | None = None,
    ) -> Location:
        location = Location.create(Coordinate(aisle, rack, level, position), scan_code)

        with self._uow_factory() as uow:
            if uow.locations.get_by_coordinate(location.coordinate) is not None:
                raise ValidationError(f"Location {location.coordinate} already exists")
            if location.scan_code and uow.locations.get_by_scan_code(location.scan_code):
                raise ValidationError(f"Scan code '{location.scan_code}' is already in use")
            uow.locations.save(location)
            uow.commit()
        return location
