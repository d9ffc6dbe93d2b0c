"""Location aggregate: a physical slot in the warehouse."""

from __future__ import annotations

from dataclasses import dataclass

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import Coordinate


@dataclass
class Location:
    """A warehouse slot, optionally labelled with a scannable code."""

    id: int | None
    coordinate: Coordinate
    scan_code: str | None = None

    @staticmethod
    def create(coordinate: Coordinate, scan_code: str | None = None) -> Location:
        location = Location(id=None, coordinate=coordinate)
        location.assign_scan_code(scan_code)
        return location

    def assign_scan_code(self, scan_code: str | None) -> None:
        if scan_code is not None:
            scan_code = scan_code.strip()
            if not scan_code:
                raise ValidationError("Scan code cannot be blank")
        self.scan_code = scan_code

    def __str__(self) -> str:
        return str(self.coordinate)
