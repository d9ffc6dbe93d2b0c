"""Abstract repository for Location aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.location import Location
from wms.domain.model.value_objects import Coordinate


class LocationRepository(ABC):

    @abstractmethod
    def get_by_id(self, location_id: int) -> Location | None:
        """Return a location by its ID, or None."""

    @abstractmethod
    def get_by_scan_code(self, scan_code: str) -> Location | None:
        """Return the location labelled with *scan_code*, or None."""

    @abstractmethod
    def get_by_coordinate(self, coordinate: Coordinate) -> Location | None:
        """Return the location at *coordinate*, or None."""

    @abstractmethod
    def list_all(self) -> list[Location]:
        """Return every location."""

    @abstractmethod
    def save(self, location: Location) -> None:
        """Persist a new or updated location, assigning an ID if new."""

    @abstractmethod
    def delete(self, location_id: int) -> None:
        """Remove a location."""
