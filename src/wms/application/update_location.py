"""Application service: Update Location use case (relabel the scan code)."""

from __future__ import annotations

from wms.domain.exceptions import LocationNotFound, ValidationError
from wms.domain.model.location import Location
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class UpdateLocationHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, location_id: int, scan_code: str | None) -> Location:
        with self._uow_factory() as uow:
            location = uow.locations.get_by_id(location_id)
            if location is None:
                raise LocationNotFound(location_id)

            location.assign_scan_code(scan_code)
            if location.scan_code:
                holder = uow.locations.get_by_scan_code(location.scan_code)
                if holder is not None and holder.id != location.id:
                    raise ValidationError(f"Scan code '{location.scan_code}' is already in use")

            uow.locations.save(location)
            uow.commit()
        return location
