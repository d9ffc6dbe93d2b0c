"""InventoryUnit aggregate: one tracked physical piece of stock.

A unit is admitted in QUARANTINE by a manifest, placed into a location,
then consumed (wholly or, for Measured products, by partial cuts) by orders.

Invariants:
- a unit in QUARANTINE, DISPATCHED or RETIRED never has a location
- ``remaining_quantity`` of a Measured unit stays within [0, original]
- an AVAILABLE unit without a location was returned by an order
  cancellation and must be re-placed before it can be allocated or moved
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from wms.domain.exceptions import (
    InsufficientQuantity,
    InvalidState,
    UnitUnavailable,
    ValidationError,
)
from wms.domain.model.product import Product, UnitKind
from wms.domain.model.status import INITIAL_STATUS, UnitStatus
from wms.domain.model.value_objects import Measure


@dataclass
class InventoryUnit:

    id: int | None
    serial: str
    product_sku: str
    unit_kind: UnitKind  # snapshot of the product's kind at admission
    manifest_id: int | None
    admitted_at: datetime
    status: UnitStatus = INITIAL_STATUS
    location_id: int | None = None
    original_quantity: Measure | None = None
    remaining_quantity: Measure | None = None
    placed_at: datetime | None = None
    dispatched_at: datetime | None = None
    retired_at: datetime | None = None
    notes: str | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def admit(
        serial: str,
        product: Product,
        manifest_id: int | None,
        admitted_at: datetime,
        quantity: Measure | None = None,
        notes: str | None = None,
    ) -> InventoryUnit:
        """Create a new unit in quarantine.

        Measured units need a positive quantity (falling back to the
        product default); Discrete units ignore the quantity entirely.
        """
        if not serial or not serial.strip():
            raise ValidationError("Unit serial is required")

        original: Measure | None = None
        if product.is_measured:
            original = quantity if quantity is not None else product.default_quantity
            if original is None or original.is_zero:
                raise ValidationError(
                    f"Unit {serial.strip()} of measured product {product.sku} needs a positive quantity"
                )

        return InventoryUnit(
            id=None,
            serial=serial.strip(),
            product_sku=product.sku,
            unit_kind=product.unit_kind,
            manifest_id=manifest_id,
            admitted_at=admitted_at,
            original_quantity=original,
            remaining_quantity=original,
            notes=notes,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_measured(self) -> bool:
        return self.unit_kind is UnitKind.MEASURED

    @property
    def needs_placement(self) -> bool:
        """True for fresh quarantine units and for units returned by cancellation."""
        if self.status is UnitStatus.QUARANTINE:
            return True
        return self.status is UnitStatus.AVAILABLE and self.location_id is None

    @property
    def is_allocatable(self) -> bool:
        if self.status is not UnitStatus.AVAILABLE or self.location_id is None:
            return False
        return not self.is_measured or not self.remaining_quantity.is_zero

    @property
    def consumed_quantity(self) -> Measure | None:
        if not self.is_measured:
            return None
        return self.original_quantity - self.remaining_quantity

    # --- Placement and movement -----------------------------------------------

    def ensure_placeable(self) -> None:
        if not self.needs_placement:
            raise InvalidState(
                f"Unit {self.serial} cannot be placed (status={self.status.value}, "
                f"location={'set' if self.location_id is not None else 'none'})",
                subject=self.serial,
                status=self.status.value,
            )

    def place(self, location_id: int, at: datetime) -> None:
        """Verify the unit and put it into *location_id*."""
        self.ensure_placeable()
        self.status = self.status.transition_to(UnitStatus.AVAILABLE, subject=self.serial)
        self.location_id = location_id
        self.placed_at = at

    def relocate(self, location_id: int) -> int:
        """Move an available, placed unit. Returns the previous location id."""
        if self.status is not UnitStatus.AVAILABLE:
            raise InvalidState(
                f"Unit {self.serial} cannot be moved in {self.status.value} status",
                subject=self.serial,
                status=self.status.value,
            )
        if self.location_id is None:
            raise InvalidState(
                f"Unit {self.serial} has no location; place it before moving it",
                subject=self.serial,
                status=self.status.value,
            )
        if location_id == self.location_id:
            raise ValidationError(f"Unit {self.serial} is already at that location")
        previous = self.location_id
        self.location_id = location_id
        return previous

    # --- Allocation -----------------------------------------------------------

    def requested_quantity(self, raw: str | int | Decimal | None) -> Measure | None:
        """Interpret an order line's requested amount for this unit.

        Discrete units are always taken whole, so whatever was sent is
        ignored. A Measured unit needs a number; anything at or below
        zero can never be satisfied from its remainder.
        """
        if not self.is_measured:
            return None
        if raw is None or str(raw).strip() == "":
            raise ValidationError(f"A quantity is required for measured unit {self.serial}")
        try:
            amount = Decimal(str(raw).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid quantity: {raw!r}") from exc
        if not amount.is_finite():
            raise ValidationError(f"Invalid quantity: {raw!r}")
        if amount <= 0:
            raise InsufficientQuantity(self.serial, amount, self.remaining_quantity)
        return Measure(amount)

    def check_allocatable(self, quantity: Measure | None) -> None:
        """Raise if ``take(quantity)`` would be illegal. Never mutates."""
        if self.is_measured:
            if quantity is None:
                raise ValidationError(
                    f"A quantity is required for measured unit {self.serial}"
                )
            if quantity.is_zero or (
                self.status is UnitStatus.DISPATCHED and self.remaining_quantity.is_zero
            ):
                raise InsufficientQuantity(self.serial, quantity, self.remaining_quantity)
        if not self.is_allocatable:
            raise UnitUnavailable(self.serial, self.status.value)
        if self.is_measured and quantity > self.remaining_quantity:
            raise InsufficientQuantity(self.serial, quantity, self.remaining_quantity)

    def take(self, quantity: Measure | None, at: datetime) -> bool:
        """Consume the unit (Discrete) or *quantity* of it (Measured).

        Returns True when the unit was depleted and is now DISPATCHED,
        False when a Measured unit keeps a remainder in place.
        """
        self.check_allocatable(quantity)
        if self.is_measured:
            self.remaining_quantity = self.remaining_quantity - quantity
            if not self.remaining_quantity.is_zero:
                return False
        self.status = self.status.transition_to(UnitStatus.DISPATCHED, subject=self.serial)
        self.location_id = None
        self.dispatched_at = at
        return True

    def restore(self, quantity: Measure | None, depleted: bool) -> None:
        """Undo a ``take`` as part of an order cancellation.

        A depleted unit comes back AVAILABLE without a location: its
        physical binding was lost at dispatch, so it must be re-placed.
        """
        if depleted:
            self.status = self.status.transition_to(
                UnitStatus.AVAILABLE, subject=self.serial, via_cancellation=True
            )
            self.location_id = None
            self.dispatched_at = None
        elif self.status is not UnitStatus.AVAILABLE:
            raise InvalidState(
                f"Unit {self.serial} cannot take back stock in {self.status.value} status",
                subject=self.serial,
                status=self.status.value,
            )
        if self.is_measured:
            restored = self.remaining_quantity + quantity
            if restored > self.original_quantity:
                raise ValidationError(
                    f"Restoring {quantity} to unit {self.serial} would exceed its "
                    f"original quantity {self.original_quantity}"
                )
            self.remaining_quantity = restored

    # --- Retirement -----------------------------------------------------------

    def retire(self, at: datetime) -> int | None:
        """Write the unit off. Returns the location it was removed from."""
        self.status = self.status.transition_to(UnitStatus.RETIRED, subject=self.serial)
        previous = self.location_id
        self.location_id = None
        self.retired_at = at
        return previous
