"""Manifest aggregate: a supplier delivery grouping newly admitted units."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from wms.domain.model.status import UnitStatus

DEFAULT_SUPPLIER = "N/A"


class ManifestStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"
    DISCREPANCY = "DISCREPANCY"


@dataclass
class Manifest:
    """A delivery record. Its status is never stored; it is derived from units."""

    id: int | None
    supplier: str
    arrival_date: date
    created_at: datetime
    updated_at: datetime
    skipped_skus: list[str] = field(default_factory=list)

    @staticmethod
    def create(
        supplier: str | None,
        arrival_date: date,
        created_at: datetime,
        skipped_skus: Iterable[str] = (),
    ) -> Manifest:
        label = (supplier or "").strip() or DEFAULT_SUPPLIER
        return Manifest(
            id=None,
            supplier=label,
            arrival_date=arrival_date,
            created_at=created_at,
            updated_at=created_at,
            skipped_skus=list(skipped_skus),
        )

    def status_for(self, unit_statuses: Iterable[UnitStatus]) -> ManifestStatus:
        """Derive the receiving status from the current status of every unit."""
        statuses = list(unit_statuses)
        waiting = sum(1 for s in statuses if s is UnitStatus.QUARANTINE)
        if statuses and waiting == len(statuses):
            return ManifestStatus.PENDING
        if waiting:
            return ManifestStatus.PROCESSING
        if self.skipped_skus:
            return ManifestStatus.DISCREPANCY
        return ManifestStatus.COMPLETE
