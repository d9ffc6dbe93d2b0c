"""Integration tests for relocation, retirement and the movement ledger."""

import pytest

from wms.application.allocate_order import AllocateOrderHandler
from wms.application.dto import AllocationLineSpec
from wms.application.list_movements import ListMovementsHandler
from wms.application.relocate_unit import RelocateUnitHandler
from wms.application.retire_unit import RetireUnitHandler
from wms.application.show_unit import ShowUnitHandler
from wms.domain.exceptions import (
    InvalidState,
    LocationNotFound,
    UnitNotFound,
    UnitUnavailable,
    ValidationError,
)
from wms.domain.model.movement import PLACEMENT, RELOCATION, RETIREMENT
from wms.domain.model.status import UnitStatus
from tests.fakes import stocked_warehouse


class TestRelocate:

    def test_move_recorded(self):
        wh = stocked_warehouse()
        unit_id = wh.unit_id("P-1")

        RelocateUnitHandler(wh.uow, wh.clock).handle(unit_id, 2, actor="bo")

        unit = wh.unit("P-1")
        assert unit.location_id == 2
        assert unit.status is UnitStatus.AVAILABLE
        last = list(ListMovementsHandler(wh.uow).handle(unit_id))[-1]
        assert (last.from_location_id, last.to_location_id) == (1, 2)
        assert last.reason == RELOCATION
        assert last.actor == "bo"

    def test_custom_reason(self):
        wh = stocked_warehouse()
        unit_id = wh.unit_id("P-1")
        RelocateUnitHandler(wh.uow, wh.clock).handle(unit_id, 2, reason="consolidation")
        last = list(ListMovementsHandler(wh.uow).handle(unit_id))[-1]
        assert last.reason == "consolidation"

    def test_same_location_rejected(self):
        wh = stocked_warehouse()
        with pytest.raises(ValidationError, match="already at that location"):
            RelocateUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("P-1"), 1)

    def test_unknown_location(self):
        wh = stocked_warehouse()
        with pytest.raises(LocationNotFound):
            RelocateUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("P-1"), 99)

    def test_unknown_unit(self):
        wh = stocked_warehouse()
        with pytest.raises(UnitNotFound):
            RelocateUnitHandler(wh.uow, wh.clock).handle(99, 2)

    def test_dispatched_unit_cannot_move(self):
        wh = stocked_warehouse()
        AllocateOrderHandler(wh.uow, wh.clock).handle(
            "CUST-1", [AllocationLineSpec(wh.unit_id("P-1"))]
        )
        with pytest.raises(InvalidState, match="DISPATCHED"):
            RelocateUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("P-1"), 2)

    def test_quarantined_unit_cannot_move(self):
        wh = stocked_warehouse()
        wh.receive(("P-9", "PUMP"))
        with pytest.raises(InvalidState, match="QUARANTINE"):
            RelocateUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("P-9"), 2)


class TestRetire:

    def test_retire_with_reason(self):
        wh = stocked_warehouse()
        unit_id = wh.unit_id("P-1")

        RetireUnitHandler(wh.uow, wh.clock).handle(unit_id, reason="water damage")

        unit = wh.unit("P-1")
        assert unit.status is UnitStatus.RETIRED
        assert unit.location_id is None
        last = list(ListMovementsHandler(wh.uow).handle(unit_id))[-1]
        assert last.reason == f"{RETIREMENT}: water damage"
        assert last.from_location_id == 1

    def test_retired_unit_cannot_be_allocated(self):
        wh = stocked_warehouse()
        RetireUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("P-1"))
        with pytest.raises(UnitUnavailable, match="RETIRED"):
            AllocateOrderHandler(wh.uow, wh.clock).handle(
                "CUST-1", [AllocationLineSpec(wh.unit_id("P-1"))]
            )

    def test_retire_twice_rejected(self):
        wh = stocked_warehouse()
        handler = RetireUnitHandler(wh.uow, wh.clock)
        handler.handle(wh.unit_id("P-1"))
        with pytest.raises(InvalidState):
            handler.handle(wh.unit_id("P-1"))


class TestMovementLedger:

    def test_trail_in_append_order(self):
        wh = stocked_warehouse()
        unit_id = wh.unit_id("P-1")
        relocate = RelocateUnitHandler(wh.uow, wh.clock)
        relocate.handle(unit_id, 2)
        relocate.handle(unit_id, 1)

        trail = list(ListMovementsHandler(wh.uow).handle(unit_id))
        assert [r.reason for r in trail] == [PLACEMENT, RELOCATION, RELOCATION]
        assert [r.id for r in trail] == sorted(r.id for r in trail)

    def test_sequence_is_restartable_and_sees_new_records(self):
        wh = stocked_warehouse()
        unit_id = wh.unit_id("P-1")
        trail = ListMovementsHandler(wh.uow).handle(unit_id)

        assert len(list(trail)) == 1
        RelocateUnitHandler(wh.uow, wh.clock).handle(unit_id, 2)
        assert len(list(trail)) == 2
        assert len(list(trail)) == 2

    def test_unknown_unit(self):
        wh = stocked_warehouse()
        with pytest.raises(UnitNotFound):
            ListMovementsHandler(wh.uow).handle(404)

    def test_unit_without_movements(self):
        wh = stocked_warehouse()
        wh.receive(("P-9", "PUMP"))
        assert list(ListMovementsHandler(wh.uow).handle(wh.unit_id("P-9"))) == []


class TestShowUnit:

    def test_by_serial_and_id(self):
        wh = stocked_warehouse()
        by_serial = ShowUnitHandler(wh.uow).handle(serial="R-2")
        by_id = ShowUnitHandler(wh.uow).handle(unit_id=by_serial.id)
        assert by_serial == by_id
        assert by_id.remaining_quantity == "50"
        assert by_id.consumed_quantity == "0"
        assert by_id.status == "AVAILABLE"

    def test_unknown(self):
        wh = stocked_warehouse()
        with pytest.raises(UnitNotFound):
            ShowUnitHandler(wh.uow).handle(serial="NOPE")

    def test_discrete_unit_has_no_quantities(self):
        wh = stocked_warehouse()
        pump = ShowUnitHandler(wh.uow).handle(serial="P-1")
        assert pump.remaining_quantity is None
        assert pump.consumed_quantity is None
