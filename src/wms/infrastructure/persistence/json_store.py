"""JSON-file-backed record store.

Behaves like MemoryStore (same transactions, locks and constraints) and
keeps every table in ``<data_dir>/<table>.json``. Several processes may
share one data directory:

- every disk access happens under an exclusive ``<data_dir>/.lock``
  file lock;
- each unit of work reloads the tables when it starts and again once
  its row locks are held, and every commit reloads them before its
  stale-row and constraint checks run;
- id sequences live in ``sequences.json`` so two processes never hand
  out the same id.

A commit first writes the new images of all touched tables to
``commit.json``. Once that file is in place the commit is durable: the
table files are rewritten from it and it is removed. A journal left
behind by a crash is replayed on the next load.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from wms.domain.exceptions import Contention
from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.location import Location
from wms.domain.model.manifest import Manifest
from wms.domain.model.movement import MovementRecord
from wms.domain.model.order import Order, OrderLine, OrderStatus
from wms.domain.model.product import Product, UnitKind
from wms.domain.model.status import UnitStatus
from wms.domain.model.value_objects import Coordinate, Measure
from wms.infrastructure.persistence.locking import RowLockManager
from wms.infrastructure.persistence.memory_store import TABLES, Changes, MemoryStore
from wms.logging_config import get_logger

logger = get_logger(__name__)

JOURNAL = "commit.json"
SEQUENCES = "sequences.json"


class JsonStore(MemoryStore):

    def __init__(
        self,
        data_dir: Path,
        lock_manager: RowLockManager | None = None,
        file_lock_timeout: float = 10.0,
    ) -> None:
        super().__init__(lock_manager)
        self._data_dir = data_dir
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(str(data_dir / ".lock"), timeout=file_lock_timeout)
        with self._exclusive():
            self._load()

    def refresh(self) -> None:
        with self._exclusive():
            self._load()

    def next_id(self, table: str) -> int:
        with self._exclusive():
            path = self._data_dir / SEQUENCES
            counters = json.loads(path.read_text(encoding="utf-8")) if path.exists() else {}
            with self.mutex:
                value = max(counters.get(table, 0), self._sequences[table]) + 1
                self._sequences[table] = value
            counters[table] = value
            self._write_json(path, counters)
            return value

    def apply(self, changes: Changes, bases: Changes | None = None) -> None:
        with self._exclusive():
            self._load()
            super().apply(changes, bases)

    def _write_through(self, images: dict[str, dict[Hashable, Any]]) -> None:
        records = {
            table: [_CODECS[table][0](row) for row in image.values()]
            for table, image in images.items()
        }
        journal = self._data_dir / JOURNAL
        self._write_json(journal, records)
        try:
            self._write_tables(records)
        except OSError:
            logger.exception(
                "Table files not rewritten; commit kept in journal",
                extra={"tables": sorted(records)},
            )
            return
        journal.unlink()

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        try:
            self._file_lock.acquire()
        except Timeout as exc:
            raise Contention([self._file_lock.lock_file], 1) from exc
        try:
            yield
        finally:
            self._file_lock.release()

    def _load(self) -> None:
        """Replay a leftover journal, then read every table from disk."""
        journal = self._data_dir / JOURNAL
        if journal.exists():
            records = json.loads(journal.read_text(encoding="utf-8"))
            self._write_tables(records)
            journal.unlink()
            logger.warning("Replayed interrupted commit", extra={"tables": sorted(records)})

        loaded = {}
        for table in TABLES:
            to_domain = _CODECS[table][1]
            rows = [to_domain(raw) for raw in self._load_raw(table)]
            loaded[table] = {_key(table, row): row for row in rows}
        with self.mutex:
            self.tables.update(loaded)
            self.reset_sequences()

    def _write_tables(self, records: dict[str, list[dict]]) -> None:
        for table in sorted(records):
            self._write_json(self._path(table), records[table])
            logger.debug("Persisted table", extra={"table": table, "rows": len(records[table])})

    def _path(self, table: str) -> Path:
        return self._data_dir / f"{table}.json"

    def _load_raw(self, table: str) -> list[dict]:
        path = self._path(table)
        if not path.exists():
            path.write_text("[]", encoding="utf-8")
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, path)


def _key(table: str, row: Any) -> Any:
    return row.sku if table == "products" else row.id


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _measure_raw(value: Measure | None) -> str | None:
    return None if value is None else str(value.amount)


def _measure(raw: str | None) -> Measure | None:
    return None if raw is None else Measure(Decimal(raw))


def _dt_raw(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _dt(raw: str | None) -> datetime | None:
    return None if raw is None else datetime.fromisoformat(raw)


def _product_to_raw(p: Product) -> dict:
    return {
        "sku": p.sku,
        "name": p.name,
        "unit_kind": p.unit_kind.value,
        "default_quantity": _measure_raw(p.default_quantity),
        "description": p.description,
        "is_active": p.is_active,
    }


def _product_to_domain(raw: dict) -> Product:
    return Product(
        sku=raw["sku"],
        name=raw["name"],
        unit_kind=UnitKind(raw["unit_kind"]),
        default_quantity=_measure(raw.get("default_quantity")),
        description=raw.get("description"),
        is_active=raw.get("is_active", True),
    )


def _location_to_raw(loc: Location) -> dict:
    c = loc.coordinate
    return {
        "id": loc.id,
        "aisle": c.aisle,
        "rack": c.rack,
        "level": c.level,
        "position": c.position,
        "scan_code": loc.scan_code,
    }


def _location_to_domain(raw: dict) -> Location:
    return Location(
        id=raw["id"],
        coordinate=Coordinate(raw["aisle"], raw["rack"], raw["level"], raw["position"]),
        scan_code=raw.get("scan_code"),
    )


def _unit_to_raw(u: InventoryUnit) -> dict:
    return {
        "id": u.id,
        "serial": u.serial,
        "product_sku": u.product_sku,
        "unit_kind": u.unit_kind.value,
        "manifest_id": u.manifest_id,
        "status": u.status.value,
        "location_id": u.location_id,
        "original_quantity": _measure_raw(u.original_quantity),
        "remaining_quantity": _measure_raw(u.remaining_quantity),
        "admitted_at": _dt_raw(u.admitted_at),
        "placed_at": _dt_raw(u.placed_at),
        "dispatched_at": _dt_raw(u.dispatched_at),
        "retired_at": _dt_raw(u.retired_at),
        "notes": u.notes,
    }


def _unit_to_domain(raw: dict) -> InventoryUnit:
    return InventoryUnit(
        id=raw["id"],
        serial=raw["serial"],
        product_sku=raw["product_sku"],
        unit_kind=UnitKind(raw["unit_kind"]),
        manifest_id=raw.get("manifest_id"),
        admitted_at=_dt(raw["admitted_at"]),
        status=UnitStatus(raw["status"]),
        location_id=raw.get("location_id"),
        original_quantity=_measure(raw.get("original_quantity")),
        remaining_quantity=_measure(raw.get("remaining_quantity")),
        placed_at=_dt(raw.get("placed_at")),
        dispatched_at=_dt(raw.get("dispatched_at")),
        retired_at=_dt(raw.get("retired_at")),
        notes=raw.get("notes"),
    )


def _manifest_to_raw(m: Manifest) -> dict:
    return {
        "id": m.id,
        "supplier": m.supplier,
        "arrival_date": m.arrival_date.isoformat(),
        "created_at": _dt_raw(m.created_at),
        "updated_at": _dt_raw(m.updated_at),
        "skipped_skus": list(m.skipped_skus),
    }


def _manifest_to_domain(raw: dict) -> Manifest:
    return Manifest(
        id=raw["id"],
        supplier=raw["supplier"],
        arrival_date=date.fromisoformat(raw["arrival_date"]),
        created_at=_dt(raw["created_at"]),
        updated_at=_dt(raw["updated_at"]),
        skipped_skus=list(raw.get("skipped_skus", [])),
    )


def _order_to_raw(o: Order) -> dict:
    return {
        "id": o.id,
        "customer_id": o.customer_id,
        "notes": o.notes,
        "status": o.status.value,
        "dispatch_date": _dt_raw(o.dispatch_date),
        "created_at": _dt_raw(o.created_at),
        "review_reasons": list(o.review_reasons),
        "lines": [
            {
                "unit_id": line.unit_id,
                "serial": line.serial,
                "product_sku": line.product_sku,
                "quantity": _measure_raw(line.quantity),
                "depleted": line.depleted,
                "location_id": line.location_id,
            }
            for line in o.lines
        ],
    }


def _order_to_domain(raw: dict) -> Order:
    lines = [
        OrderLine(
            unit_id=i["unit_id"],
            serial=i["serial"],
            product_sku=i["product_sku"],
            quantity=_measure(i.get("quantity")),
            depleted=i["depleted"],
            location_id=i.get("location_id"),
        )
        for i in raw["lines"]
    ]
    return Order(
        id=raw["id"],
        customer_id=raw["customer_id"],
        lines=lines,
        notes=raw.get("notes", ""),
        status=OrderStatus(raw["status"]),
        dispatch_date=_dt(raw.get("dispatch_date")),
        created_at=_dt(raw["created_at"]),
        review_reasons=list(raw.get("review_reasons", [])),
    )


def _movement_to_raw(r: MovementRecord) -> dict:
    return {
        "id": r.id,
        "unit_id": r.unit_id,
        "from_location_id": r.from_location_id,
        "to_location_id": r.to_location_id,
        "reason": r.reason,
        "actor": r.actor,
        "recorded_at": _dt_raw(r.recorded_at),
    }


def _movement_to_domain(raw: dict) -> MovementRecord:
    return MovementRecord(
        id=raw["id"],
        unit_id=raw["unit_id"],
        from_location_id=raw.get("from_location_id"),
        to_location_id=raw.get("to_location_id"),
        reason=raw["reason"],
        actor=raw.get("actor"),
        recorded_at=_dt(raw["recorded_at"]),
    )


_CODECS: dict[str, tuple[Callable[[Any], dict], Callable[[dict], Any]]] = {
    "products": (_product_to_raw, _product_to_domain),
    "locations": (_location_to_raw, _location_to_domain),
    "units": (_unit_to_raw, _unit_to_domain),
    "manifests": (_manifest_to_raw, _manifest_to_domain),
    "orders": (_order_to_raw, _order_to_domain),
    "movements": (_movement_to_raw, _movement_to_domain),
}
