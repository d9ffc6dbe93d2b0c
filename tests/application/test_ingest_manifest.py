"""Integration tests for the IngestManifest use case."""

from datetime import date

import pytest

from wms.application.dto import ManifestLineSpec
from wms.application.ingest_manifest import IngestManifestHandler
from wms.application.show_manifest import ListManifestsHandler
from wms.domain.exceptions import (
    DuplicateSerial,
    EmptyManifest,
    ProductNotFound,
    ValidationError,
)
from wms.domain.model.product import UnitKind
from wms.domain.model.status import UnitStatus
from wms.domain.model.value_objects import Measure
from wms.infrastructure.persistence.memory_store import MemoryUnitRepository
from tests.fakes import FakeWarehouse


def _setup():
    wh = FakeWarehouse()
    wh.product("CABLE", UnitKind.MEASURED, default_quantity="100")
    wh.product("PUMP")
    return wh, IngestManifestHandler(wh.uow, wh.clock)


class TestIngestHappyPath:

    def test_units_admitted_in_quarantine(self):
        wh, handler = _setup()

        result = handler.handle(
            "Acme",
            date(2024, 2, 28),
            [ManifestLineSpec("R-1", "CABLE", "25.5"), ManifestLineSpec("P-1", "PUMP", "3")],
        )

        assert result.admitted_count == 2
        assert result.skipped_skus == []
        roll, pump = wh.unit("R-1"), wh.unit("P-1")
        assert roll.status is UnitStatus.QUARANTINE
        assert roll.location_id is None
        assert roll.remaining_quantity == Measure.of("25.5")
        assert roll.manifest_id == result.manifest_id
        assert roll.admitted_at == wh.clock.now()
        assert pump.original_quantity is None

    def test_measured_default_quantity_used(self):
        wh, handler = _setup()
        handler.handle(None, None, [ManifestLineSpec("R-1", "CABLE")])
        assert wh.unit("R-1").original_quantity == Measure.of("100")

    def test_supplier_and_arrival_defaults(self):
        wh, handler = _setup()
        handler.handle(None, None, [ManifestLineSpec("P-1", "PUMP")])

        (manifest,) = ListManifestsHandler(wh.uow).handle()
        assert manifest.supplier == "N/A"
        assert manifest.arrival_date == wh.clock.now().date()


class TestUnknownSkus:

    def test_one_known_one_unknown(self):
        wh, handler = _setup()

        result = handler.handle(
            "Acme", None, [ManifestLineSpec("S1", "CABLE", "10"), ManifestLineSpec("S2", "SKU-B", "5")]
        )

        assert result.admitted_count == 1
        assert result.skipped_skus == ["SKU-B"]
        assert wh.unit("S1").status is UnitStatus.QUARANTINE

    def test_unknown_sku_lines_skipped(self):
        wh, handler = _setup()

        result = handler.handle(
            "Acme",
            None,
            [
                ManifestLineSpec("P-1", "PUMP"),
                ManifestLineSpec("X-1", "GHOST"),
                ManifestLineSpec("X-2", "GHOST"),
                ManifestLineSpec("Y-1", "PHANTOM"),
            ],
        )

        assert result.admitted_count == 1
        assert result.skipped_skus == ["GHOST", "PHANTOM"]
        assert wh.unit("X-1") is None

        (manifest,) = ListManifestsHandler(wh.uow).handle()
        assert manifest.skipped_skus == ["GHOST", "PHANTOM"]

    def test_skipped_sku_logged(self, caplog):
        _, handler = _setup()
        with caplog.at_level("WARNING", logger="wms"):
            handler.handle("Acme", None, [ManifestLineSpec("P-1", "PUMP"), ManifestLineSpec("X", "GHOST")])
        assert any(getattr(r, "sku", None) == "GHOST" for r in caplog.records)

    def test_all_unknown_is_empty_manifest(self):
        wh, handler = _setup()

        with pytest.raises(EmptyManifest) as exc_info:
            handler.handle("Acme", None, [ManifestLineSpec("X-1", "GHOST")])

        assert exc_info.value.skipped_skus == ["GHOST"]
        assert ListManifestsHandler(wh.uow).handle() == []


class TestIngestValidation:

    def test_empty_manifest_rejected(self):
        _, handler = _setup()
        with pytest.raises(EmptyManifest):
            handler.handle("Acme", None, [])

    def test_blank_serial_rejected(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="line 2: serial is required"):
            handler.handle("Acme", None, [ManifestLineSpec("P-1", "PUMP"), ManifestLineSpec(" ", "PUMP")])

    def test_serial_repeated_within_manifest(self):
        wh, handler = _setup()
        with pytest.raises(DuplicateSerial) as exc_info:
            handler.handle(
                "Acme", None, [ManifestLineSpec("P-1", "PUMP"), ManifestLineSpec("P-1", "PUMP")]
            )
        assert exc_info.value.serials == ["P-1"]
        assert wh.unit("P-1") is None

    def test_serial_already_stored(self):
        wh, handler = _setup()
        handler.handle("Acme", None, [ManifestLineSpec("P-1", "PUMP")])

        with pytest.raises(DuplicateSerial, match="P-1"):
            handler.handle("Acme", None, [ManifestLineSpec("P-2", "PUMP"), ManifestLineSpec("P-1", "PUMP")])

        assert wh.unit("P-2") is None
        assert len(ListManifestsHandler(wh.uow).handle()) == 1

    def test_zero_measured_quantity_rejected(self):
        wh, handler = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle("Acme", None, [ManifestLineSpec("R-1", "CABLE", "0")])
        assert ListManifestsHandler(wh.uow).handle() == []


class TestIngestAtomicity:

    def test_failure_midway_leaves_no_manifest(self, monkeypatch):
        wh, handler = _setup()
        original_save = MemoryUnitRepository.save
        calls = []

        def failing_save(self, unit):
            calls.append(unit.serial)
            if len(calls) == 2:
                raise ProductNotFound(unit.product_sku)
            original_save(self, unit)

        monkeypatch.setattr(MemoryUnitRepository, "save", failing_save)

        with pytest.raises(ProductNotFound):
            handler.handle(
                "Acme", None, [ManifestLineSpec("P-1", "PUMP"), ManifestLineSpec("P-2", "PUMP")]
            )

        monkeypatch.undo()
        assert ListManifestsHandler(wh.uow).handle() == []
        assert wh.unit("P-1") is None
