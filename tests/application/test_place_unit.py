"""Integration tests for the PlaceUnit use case."""

import pytest

from wms.application.list_movements import ListMovementsHandler
from wms.application.place_unit import PlaceUnitHandler
from wms.domain.exceptions import InvalidState, LocationNotFound, UnitNotFound
from wms.domain.model.movement import PLACEMENT
from wms.domain.model.status import UnitStatus
from tests.fakes import FakeWarehouse


def _setup():
    wh = FakeWarehouse()
    wh.product("PUMP")
    wh.location("BIN-1")
    wh.location("BIN-2")
    wh.receive(("P-1", "PUMP"), ("P-2", "PUMP"))
    return wh, PlaceUnitHandler(wh.uow, wh.clock)


class TestPlaceHappyPath:

    def test_unit_becomes_available_at_location(self):
        wh, handler = _setup()
        wh.clock.advance(hours=2)

        unit_id = handler.handle("P-1", "BIN-2", actor="ana")

        unit = wh.unit("P-1")
        assert unit.id == unit_id
        assert unit.status is UnitStatus.AVAILABLE
        assert unit.location_id == 2
        assert unit.placed_at == wh.clock.now()

    def test_placement_recorded(self):
        wh, handler = _setup()
        unit_id = handler.handle("P-1", "BIN-1", actor="ana")

        (record,) = ListMovementsHandler(wh.uow).handle(unit_id)
        assert record.reason == PLACEMENT
        assert record.from_location_id is None
        assert record.to_location_id == 1
        assert record.actor == "ana"

    def test_scan_code_whitespace_ignored(self):
        wh, handler = _setup()
        handler.handle(" P-1 ", " BIN-1 ")
        assert wh.unit("P-1").location_id == 1


class TestPlaceValidation:

    def test_second_placement_rejected(self):
        wh, handler = _setup()
        handler.handle("P-1", "BIN-1")

        with pytest.raises(InvalidState, match="cannot be placed"):
            handler.handle("P-1", "BIN-2")

        assert wh.unit("P-1").location_id == 1
        assert len(list(ListMovementsHandler(wh.uow).handle(wh.unit_id("P-1")))) == 1

    def test_unknown_serial(self):
        _, handler = _setup()
        with pytest.raises(UnitNotFound):
            handler.handle("NOPE", "BIN-1")

    def test_unknown_scan_code_leaves_unit_quarantined(self):
        wh, handler = _setup()
        with pytest.raises(LocationNotFound):
            handler.handle("P-1", "BIN-404")
        assert wh.unit("P-1").status is UnitStatus.QUARANTINE
