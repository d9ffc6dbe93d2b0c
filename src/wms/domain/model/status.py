"""Unit status vocabulary and the legal transitions between states.

Every status change on an InventoryUnit goes through ``transition_to`` so the
rules live in one table instead of being scattered across use cases.

    QUARANTINE -> AVAILABLE            placement
    AVAILABLE  -> AVAILABLE            partial decrement, relocation, re-placement
    AVAILABLE  -> DISPATCHED           allocation consumed the unit
    AVAILABLE  -> RETIRED              administrative write-off (terminal)
    DISPATCHED -> AVAILABLE            order cancellation only
    AVAILABLE <-> RESERVED             soft hold, not used by any operation yet
"""

from __future__ import annotations

from enum import Enum

from wms.domain.exceptions import InvalidState


class UnitStatus(Enum):
    QUARANTINE = "QUARANTINE"
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    DISPATCHED = "DISPATCHED"
    RETIRED = "RETIRED"

    @property
    def holds_location(self) -> bool:
        return self in (UnitStatus.AVAILABLE, UnitStatus.RESERVED)

    def can_transition_to(self, target: UnitStatus, *, via_cancellation: bool = False) -> bool:
        if self is UnitStatus.DISPATCHED and target is UnitStatus.AVAILABLE:
            return via_cancellation
        return target in _TRANSITIONS[self]

    def transition_to(
        self,
        target: UnitStatus,
        *,
        subject: object = None,
        via_cancellation: bool = False,
    ) -> UnitStatus:
        """Return *target* if the move is legal, else raise InvalidState."""
        if not self.can_transition_to(target, via_cancellation=via_cancellation):
            label = f"Unit {subject}" if subject is not None else "Unit"
            raise InvalidState(
                f"{label} cannot move from {self.value} to {target.value}",
                subject=subject,
                status=self.value,
            )
        return target


_TRANSITIONS: dict[UnitStatus, frozenset[UnitStatus]] = {
    UnitStatus.QUARANTINE: frozenset({UnitStatus.AVAILABLE}),
    UnitStatus.AVAILABLE: frozenset(
        {UnitStatus.AVAILABLE, UnitStatus.RESERVED, UnitStatus.DISPATCHED, UnitStatus.RETIRED}
    ),
    UnitStatus.RESERVED: frozenset({UnitStatus.AVAILABLE}),
    UnitStatus.DISPATCHED: frozenset(),
    UnitStatus.RETIRED: frozenset(),
}

INITIAL_STATUS = UnitStatus.QUARANTINE
