"""Application service: Delete Location use case."""

from __future__ import annotations

from wms.domain.exceptions import LocationNotFound, ReferencedEntity
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


class DeleteLocationHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, location_id: int) -> None:
        """Remove an empty location."""
        with self._uow_factory() as uow:
            if uow.locations.get_by_id(location_id) is None:
                raise LocationNotFound(location_id)
            if uow.units.any_at_location(location_id):
                raise ReferencedEntity("location", location_id, "it still holds inventory units")
            uow.locations.delete(location_id)
            uow.commit()
