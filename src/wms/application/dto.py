"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Quantities travel as
strings so no caller ever sees a float.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.movement import MovementRecord
from wms.domain.model.order import Order
from wms.domain.model.value_objects import Measure


def _fmt(value: Measure | None) -> str | None:
    return None if value is None else str(value)


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestLineSpec:
    """Input: one parsed line of a supplier manifest."""

    serial: str
    sku: str
    quantity: str | Decimal | None = None


@dataclass(frozen=True)
class AllocationLineSpec:
    """Input: one unit picked for an order, with the cut for Measured units."""

    unit_id: int
    quantity: str | Decimal | None = None


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class IngestResultDTO:
    manifest_id: int
    admitted_count: int
    skipped_skus: list[str]


@dataclass(frozen=True)
class UnitDTO:
    id: int
    serial: str
    product_sku: str
    status: str
    location_id: int | None
    original_quantity: str | None
    remaining_quantity: str | None
    consumed_quantity: str | None
    manifest_id: int | None
    admitted_at: datetime
    placed_at: datetime | None
    dispatched_at: datetime | None

    @staticmethod
    def from_domain(unit: InventoryUnit) -> UnitDTO:
        return UnitDTO(
            id=unit.id,  # type: ignore[arg-type]
            serial=unit.serial,
            product_sku=unit.product_sku,
            status=unit.status.value,
            location_id=unit.location_id,
            original_quantity=_fmt(unit.original_quantity),
            remaining_quantity=_fmt(unit.remaining_quantity),
            consumed_quantity=_fmt(unit.consumed_quantity),
            manifest_id=unit.manifest_id,
            admitted_at=unit.admitted_at,
            placed_at=unit.placed_at,
            dispatched_at=unit.dispatched_at,
        )


@dataclass(frozen=True)
class EligibleUnitDTO:
    """Output: one allocatable unit, in FIFO position."""

    unit_id: int
    serial: str
    remaining_quantity: str | None
    admitted_at: datetime


@dataclass(frozen=True)
class MovementDTO:
    id: int
    unit_id: int
    from_location_id: int | None
    to_location_id: int | None
    reason: str
    actor: str | None
    recorded_at: datetime

    @staticmethod
    def from_domain(record: MovementRecord) -> MovementDTO:
        return MovementDTO(
            id=record.id,  # type: ignore[arg-type]
            unit_id=record.unit_id,
            from_location_id=record.from_location_id,
            to_location_id=record.to_location_id,
            reason=record.reason,
            actor=record.actor,
            recorded_at=record.recorded_at,
        )


@dataclass(frozen=True)
class ManifestDTO:
    id: int
    supplier: str
    arrival_date: date
    status: str
    skipped_skus: list[str]
    created_at: datetime
    units: list[UnitDTO] = field(default_factory=list)


@dataclass(frozen=True)
class OrderLineDTO:
    unit_id: int
    serial: str
    product_sku: str
    quantity: str | None
    depleted: bool


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_id: str
    notes: str
    status: str
    dispatch_date: datetime | None
    lines: list[OrderLineDTO]
    review_reasons: list[str]
    needs_review: bool

    @staticmethod
    def from_domain(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            customer_id=order.customer_id,
            notes=order.notes,
            status=order.status.value,
            dispatch_date=order.dispatch_date,
            lines=[
                OrderLineDTO(
                    unit_id=line.unit_id,
                    serial=line.serial,
                    product_sku=line.product_sku,
                    quantity=_fmt(line.quantity),
                    depleted=line.depleted,
                )
                for line in order.lines
            ],
            review_reasons=list(order.review_reasons),
            needs_review=order.needs_review,
        )
