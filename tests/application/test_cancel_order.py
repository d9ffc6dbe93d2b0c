"""Integration tests for the CancelOrder use case."""

import pytest

from wms.application.allocate_order import AllocateOrderHandler
from wms.application.cancel_order import CancelOrderHandler
from wms.application.complete_order import CompleteOrderHandler
from wms.application.dto import AllocationLineSpec
from wms.application.list_movements import ListMovementsHandler
from wms.application.relocate_unit import RelocateUnitHandler
from wms.application.retire_unit import RetireUnitHandler
from wms.application.show_order import ShowOrderHandler
from wms.domain.exceptions import (
    InvalidState,
    ManualReviewRequired,
    OrderNotFound,
    UnitUnavailable,
)
from wms.domain.model.movement import DISPATCH, DISPATCH_CANCELLED, PLACEMENT
from wms.domain.model.order import OrderStatus
from wms.domain.model.status import UnitStatus
from wms.domain.model.value_objects import Measure
from tests.fakes import stocked_warehouse


def _setup():
    wh = stocked_warehouse()
    allocate = AllocateOrderHandler(wh.uow, wh.clock)
    order_id = allocate.handle(
        "CUST-1",
        [
            AllocationLineSpec(wh.unit_id("R-1"), "30"),
            AllocationLineSpec(wh.unit_id("R-2"), "50"),
            AllocationLineSpec(wh.unit_id("P-1")),
        ],
    )
    return wh, order_id, CancelOrderHandler(wh.uow, wh.clock)


class TestCancelReversal:

    def test_every_line_reversed(self):
        wh, order_id, handler = _setup()

        handler.handle(order_id, actor="ana")

        partial = wh.unit("R-1")
        assert partial.status is UnitStatus.AVAILABLE
        assert partial.remaining_quantity == Measure.of("100")
        assert partial.location_id == 1

        for serial in ("R-2", "P-1"):
            unit = wh.unit(serial)
            assert unit.status is UnitStatus.AVAILABLE
            assert unit.location_id is None
            assert unit.dispatched_at is None
        assert wh.unit("R-2").remaining_quantity == Measure.of("50")

        assert ShowOrderHandler(wh.uow).handle(order_id).status == OrderStatus.CANCELLED.value

    def test_reversal_recorded_in_ledger(self):
        wh, order_id, handler = _setup()
        handler.handle(order_id, actor="ana")

        trail = list(ListMovementsHandler(wh.uow).handle(wh.unit_id("P-1")))
        assert [r.reason for r in trail] == [PLACEMENT, DISPATCH, DISPATCH_CANCELLED]
        assert trail[-1].from_location_id is None
        assert trail[-1].to_location_id is None
        assert trail[-1].actor == "ana"

    def test_returned_unit_needs_replacement(self):
        wh, order_id, handler = _setup()
        handler.handle(order_id)

        with pytest.raises(UnitUnavailable):
            AllocateOrderHandler(wh.uow, wh.clock).handle(
                "CUST-2", [AllocationLineSpec(wh.unit_id("P-1"))]
            )

        wh.put_away("P-1", "BIN-2")
        unit = wh.unit("P-1")
        assert unit.status is UnitStatus.AVAILABLE
        assert unit.location_id == 2

    def test_completed_order_can_be_cancelled(self):
        wh, order_id, handler = _setup()
        CompleteOrderHandler(wh.uow).handle(order_id)
        handler.handle(order_id)
        assert ShowOrderHandler(wh.uow).handle(order_id).status == OrderStatus.CANCELLED.value


class TestCancelValidation:

    def test_unknown_order(self):
        wh, _, handler = _setup()
        with pytest.raises(OrderNotFound):
            handler.handle(404)

    def test_cancel_twice_rejected(self):
        wh, order_id, handler = _setup()
        handler.handle(order_id)
        with pytest.raises(InvalidState, match="already cancelled"):
            handler.handle(order_id)
        assert wh.unit("R-1").remaining_quantity == Measure.of("100")


class TestCancelManualReview:

    def test_retired_unit_blocks_reversal(self):
        wh, order_id, handler = _setup()
        RetireUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("R-1"), reason="damaged")

        with pytest.raises(ManualReviewRequired) as exc_info:
            handler.handle(order_id)

        assert exc_info.value.reasons == ["unit R-1 was retired"]
        dto = ShowOrderHandler(wh.uow).handle(order_id)
        assert dto.status == OrderStatus.PROCESSING.value
        assert dto.review_reasons == ["unit R-1 was retired"]
        assert dto.needs_review
        # nothing was reversed
        assert wh.unit("P-1").status is UnitStatus.DISPATCHED
        assert wh.unit("R-2").status is UnitStatus.DISPATCHED

    def test_moved_partial_unit_blocks_reversal(self):
        wh, order_id, handler = _setup()
        RelocateUnitHandler(wh.uow, wh.clock).handle(wh.unit_id("R-1"), 2)

        with pytest.raises(ManualReviewRequired, match="moved after dispatch"):
            handler.handle(order_id)
        assert wh.unit("R-1").remaining_quantity == Measure.of("70")

    def test_partial_unit_depleted_by_another_order_blocks_reversal(self):
        wh, order_id, handler = _setup()
        AllocateOrderHandler(wh.uow, wh.clock).handle(
            "CUST-2", [AllocationLineSpec(wh.unit_id("R-1"), "70")]
        )

        with pytest.raises(ManualReviewRequired, match="dispatched by another operation"):
            handler.handle(order_id)
