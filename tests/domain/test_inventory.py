"""Unit tests for the InventoryUnit aggregate."""

from datetime import datetime, timezone

import pytest

from wms.domain.exceptions import (
    InsufficientQuantity,
    InvalidState,
    UnitUnavailable,
    ValidationError,
)
from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.product import Product, UnitKind
from wms.domain.model.status import UnitStatus
from wms.domain.model.value_objects import Measure

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

CABLE = Product.create("CABLE", "Cable", UnitKind.MEASURED, Measure.of("100"))
PUMP = Product.create("PUMP", "Pump", UnitKind.DISCRETE)


def _placed(product: Product = CABLE, quantity: str | None = None) -> InventoryUnit:
    unit = InventoryUnit.admit(
        "SN-1", product, manifest_id=1, admitted_at=NOW,
        quantity=Measure.of(quantity) if quantity else None,
    )
    unit.id = 1
    unit.place(location_id=7, at=NOW)
    return unit


class TestAdmission:

    def test_measured_takes_line_quantity(self):
        unit = InventoryUnit.admit("SN-1", CABLE, 1, NOW, quantity=Measure.of("30"))
        assert unit.status is UnitStatus.QUARANTINE
        assert unit.original_quantity == Measure.of("30")
        assert unit.remaining_quantity == Measure.of("30")
        assert unit.location_id is None

    def test_measured_falls_back_to_product_default(self):
        unit = InventoryUnit.admit("SN-1", CABLE, 1, NOW)
        assert unit.original_quantity == Measure.of("100")

    def test_measured_without_any_quantity_rejected(self):
        bare = Product.create("ROPE", "Rope", UnitKind.MEASURED)
        with pytest.raises(ValidationError, match="needs a positive quantity"):
            InventoryUnit.admit("SN-1", bare, 1, NOW)

    def test_discrete_ignores_quantity(self):
        unit = InventoryUnit.admit("SN-1", PUMP, 1, NOW, quantity=Measure.of("4"))
        assert unit.original_quantity is None
        assert unit.remaining_quantity is None

    def test_blank_serial_rejected(self):
        with pytest.raises(ValidationError, match="serial is required"):
            InventoryUnit.admit("  ", PUMP, 1, NOW)


class TestPlacement:

    def test_place_makes_unit_available(self):
        unit = _placed()
        assert unit.status is UnitStatus.AVAILABLE
        assert unit.location_id == 7
        assert unit.placed_at == NOW
        assert unit.is_allocatable

    def test_second_placement_rejected(self):
        unit = _placed()
        with pytest.raises(InvalidState, match="cannot be placed"):
            unit.place(location_id=8, at=NOW)


class TestRelocation:

    def test_relocate_returns_previous(self):
        unit = _placed()
        assert unit.relocate(9) == 7
        assert unit.location_id == 9
        assert unit.status is UnitStatus.AVAILABLE

    def test_same_location_rejected(self):
        unit = _placed()
        with pytest.raises(ValidationError, match="already at that location"):
            unit.relocate(7)

    def test_quarantined_unit_cannot_move(self):
        unit = InventoryUnit.admit("SN-1", PUMP, 1, NOW)
        with pytest.raises(InvalidState, match="QUARANTINE"):
            unit.relocate(9)


class TestTake:

    def test_partial_cut_stays_in_place(self):
        unit = _placed()
        depleted = unit.take(Measure.of("40"), NOW)
        assert depleted is False
        assert unit.remaining_quantity == Measure.of("60")
        assert unit.consumed_quantity == Measure.of("40")
        assert unit.status is UnitStatus.AVAILABLE
        assert unit.location_id == 7

    def test_exact_remainder_dispatches(self):
        unit = _placed()
        assert unit.take(Measure.of("100"), NOW) is True
        assert unit.status is UnitStatus.DISPATCHED
        assert unit.location_id is None
        assert unit.dispatched_at == NOW

    def test_over_request_rejected_without_mutation(self):
        unit = _placed()
        with pytest.raises(InsufficientQuantity) as exc_info:
            unit.take(Measure.of("100.5"), NOW)
        assert exc_info.value.serial == "SN-1"
        assert unit.remaining_quantity == Measure.of("100")

    def test_depleted_measured_unit_reports_insufficient(self):
        unit = _placed()
        unit.take(Measure.of("100"), NOW)
        with pytest.raises(InsufficientQuantity):
            unit.take(Measure.of("1"), NOW)

    def test_measured_needs_quantity(self):
        unit = _placed()
        with pytest.raises(ValidationError, match="quantity is required"):
            unit.take(None, NOW)

    def test_zero_take_reports_insufficient(self):
        unit = _placed()
        with pytest.raises(InsufficientQuantity):
            unit.take(Measure.of("0"), NOW)
        assert unit.status is UnitStatus.AVAILABLE

    def test_discrete_dispatches_whole(self):
        unit = _placed(PUMP)
        assert unit.take(None, NOW) is True
        assert unit.status is UnitStatus.DISPATCHED

    def test_dispatched_discrete_unavailable(self):
        unit = _placed(PUMP)
        unit.take(None, NOW)
        with pytest.raises(UnitUnavailable, match="DISPATCHED"):
            unit.take(None, NOW)

    def test_quarantined_unit_unavailable(self):
        unit = InventoryUnit.admit("SN-1", PUMP, 1, NOW)
        with pytest.raises(UnitUnavailable):
            unit.check_allocatable(None)


class TestRestore:

    def test_partial_restore_in_place(self):
        unit = _placed()
        unit.take(Measure.of("30"), NOW)
        unit.restore(Measure.of("30"), depleted=False)
        assert unit.remaining_quantity == Measure.of("100")
        assert unit.location_id == 7

    def test_depleted_unit_comes_back_unplaced(self):
        unit = _placed()
        unit.take(Measure.of("100"), NOW)
        unit.restore(Measure.of("100"), depleted=True)
        assert unit.status is UnitStatus.AVAILABLE
        assert unit.location_id is None
        assert unit.dispatched_at is None
        assert unit.remaining_quantity == Measure.of("100")
        assert unit.needs_placement
        assert not unit.is_allocatable

    def test_restore_beyond_original_rejected(self):
        unit = _placed()
        unit.take(Measure.of("10"), NOW)
        with pytest.raises(ValidationError, match="exceed its original quantity"):
            unit.restore(Measure.of("20"), depleted=False)


class TestRetire:

    def test_retire_clears_location(self):
        unit = _placed(PUMP)
        assert unit.retire(NOW) == 7
        assert unit.status is UnitStatus.RETIRED
        assert unit.location_id is None
        assert unit.retired_at == NOW

    def test_quarantined_unit_cannot_retire(self):
        unit = InventoryUnit.admit("SN-1", PUMP, 1, NOW)
        with pytest.raises(InvalidState):
            unit.retire(NOW)


class TestRequestedQuantity:

    def test_measured_amount_parsed(self):
        assert _placed().requested_quantity(" 12.5 ") == Measure.of("12.5")

    @pytest.mark.parametrize("raw", ["5", "-1", "abc", None])
    def test_discrete_ignores_request(self, raw):
        assert _placed(PUMP).requested_quantity(raw) is None

    @pytest.mark.parametrize("raw", [None, " ", "abc", "Infinity"])
    def test_measured_rejects_non_numbers(self, raw):
        with pytest.raises(ValidationError):
            _placed().requested_quantity(raw)

    @pytest.mark.parametrize("raw", ["0", "-3"])
    def test_measured_non_positive_is_insufficient(self, raw):
        with pytest.raises(InsufficientQuantity) as exc_info:
            _placed().requested_quantity(raw)
        assert exc_info.value.remaining == Measure.of("100")
