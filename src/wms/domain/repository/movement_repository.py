"""Abstract repository for the append-only movement ledger.

Records are only ever appended; there is no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from wms.domain.model.movement import MovementRecord


class MovementRepository(ABC):

    @abstractmethod
    def append(self, record: MovementRecord) -> MovementRecord:
        """Append a record and return it with its ledger ID assigned."""

    @abstractmethod
    def iter_for_unit(self, unit_id: int) -> Iterator[MovementRecord]:
        """Yield a unit's records in append order."""
