"""MovementRecord: one immutable entry of the movement ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

PLACEMENT = "placement"
RELOCATION = "relocation"
DISPATCH = "dispatch"
DISPATCH_CANCELLED = "dispatch cancelled"
RETIREMENT = "retired"


@dataclass(frozen=True)
class MovementRecord:
    """Where a unit went, from where, why and on whose behalf.

    ``id`` is assigned by the ledger on append and grows monotonically,
    so ledger order is append order.
    """

    id: int | None
    unit_id: int
    from_location_id: int | None
    to_location_id: int | None
    reason: str
    actor: str | None
    recorded_at: datetime
