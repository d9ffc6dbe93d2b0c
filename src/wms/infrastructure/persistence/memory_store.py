"""In-memory transactional record store and its repositories.

The store keeps one dict per table. A unit of work never touches those
dicts directly: reads hand out copies, writes are buffered per table and
applied in one step under the store mutex, after the store has checked
its constraints (unique serials, referential integrity). Readers
therefore see either all of a transaction or none of it.

Every row a unit of work reads is remembered as its base image. If a
row that was read and then written no longer matches its base at
commit, someone else changed it in the meantime, and the commit fails
with StaleWrite instead of overwriting that change.
"""

from __future__ import annotations

import copy
import dataclasses
import threading
from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Any

from wms.domain.exceptions import (
    DuplicateSerial,
    LocationNotFound,
    ProductNotFound,
    ReferencedEntity,
    StaleWrite,
    ValidationError,
)
from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.location import Location
from wms.domain.model.manifest import Manifest
from wms.domain.model.movement import MovementRecord
from wms.domain.model.order import Order
from wms.domain.model.product import Product
from wms.domain.model.value_objects import Coordinate
from wms.domain.repository.location_repository import LocationRepository
from wms.domain.repository.manifest_repository import ManifestRepository
from wms.domain.repository.movement_repository import MovementRepository
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.repository.product_repository import ProductRepository
from wms.domain.repository.unit_of_work import AbstractUnitOfWork
from wms.domain.repository.unit_repository import UnitRepository
from wms.infrastructure.persistence.locking import RowLockManager
from wms.logging_config import get_logger

logger = get_logger(__name__)

TABLES = ("products", "locations", "units", "manifests", "orders", "movements")

_DELETED = object()

Changes = dict[str, dict[Hashable, Any]]


class MemoryStore:
    """Committed state shared by every unit of work."""

    def __init__(self, lock_manager: RowLockManager | None = None) -> None:
        self.mutex = threading.RLock()
        self.locks = lock_manager or RowLockManager()
        self.tables: dict[str, dict[Hashable, Any]] = {name: {} for name in TABLES}
        self._sequences: dict[str, int] = {name: 0 for name in TABLES}

    # --- Reads ----------------------------------------------------------------

    def read(self, table: str, key: Hashable) -> Any:
        with self.mutex:
            return copy.deepcopy(self.tables[table].get(key))

    def snapshot(self, table: str) -> dict[Hashable, Any]:
        with self.mutex:
            return copy.deepcopy(self.tables[table])

    def refresh(self) -> None:
        """Pick up commits made outside this store object. Nothing to do in memory."""

    def next_id(self, table: str) -> int:
        with self.mutex:
            self._sequences[table] += 1
            return self._sequences[table]

    def reset_sequences(self) -> None:
        """Continue every sequence after the highest stored integer key."""
        with self.mutex:
            for name, rows in self.tables.items():
                int_keys = [k for k in rows if isinstance(k, int)]
                self._sequences[name] = max(self._sequences[name], max(int_keys, default=0))

    # --- Writes ---------------------------------------------------------------

    def apply(self, changes: Changes, bases: Changes | None = None) -> None:
        """Apply buffered writes atomically. ``_DELETED`` marks a delete.

        *bases* holds the rows as the writer last read them; see the
        module docstring.
        """
        changes = {
            table: {k: r if r is _DELETED else copy.deepcopy(r) for k, r in rows.items()}
            for table, rows in changes.items()
            if rows
        }
        if not changes:
            return
        with self.mutex:
            self._check_stale(changes, bases or {})
            self._check_constraints(changes)
            images = {table: self._post_image(changes, table) for table in changes}
            self._write_through(images)
            self.tables.update(images)

    def _write_through(self, images: dict[str, dict[Hashable, Any]]) -> None:
        """Hook for durable stores, called with the mutex held and before
        *images* replace the committed tables. Raising aborts the commit."""

    # --- Constraints ----------------------------------------------------------

    def _check_stale(self, changes: Changes, bases: Changes) -> None:
        stale: list[str] = []
        for table, rows in changes.items():
            seen = bases.get(table, {})
            committed = self.tables[table]
            for key in rows:
                if key in seen and committed.get(key) != seen[key]:
                    stale.append(f"{table}:{key}")
        if stale:
            logger.warning("Commit rejected: stale rows", extra={"keys": stale})
            raise StaleWrite(stale)

    def _post_image(self, changes: Changes, table: str) -> dict[Hashable, Any]:
        image = dict(self.tables[table])
        for key, row in changes.get(table, {}).items():
            if row is _DELETED:
                image.pop(key, None)
            else:
                image[key] = row
        return image

    def _check_constraints(self, changes: dict[str, dict[Hashable, Any]]) -> None:
        touched_units = {k: r for k, r in changes.get("units", {}).items() if r is not _DELETED}
        deleted_products = [k for k, r in changes.get("products", {}).items() if r is _DELETED]
        deleted_locations = [k for k, r in changes.get("locations", {}).items() if r is _DELETED]

        units = self._post_image(changes, "units") if (
            touched_units or deleted_products or deleted_locations
        ) else self.tables["units"]

        if touched_units:
            products = self._post_image(changes, "products")
            locations = self._post_image(changes, "locations")
            written_serials = {u.serial for u in touched_units.values()}
            owners: dict[str, list[Hashable]] = {}
            for key, unit in units.items():
                if unit.serial in written_serials:
                    owners.setdefault(unit.serial, []).append(key)
            clashes = sorted(s for s, keys in owners.items() if len(keys) > 1)
            if clashes:
                raise DuplicateSerial(clashes)
            for unit in touched_units.values():
                if unit.product_sku not in products:
                    raise ProductNotFound(unit.product_sku)
                if unit.location_id is not None and unit.location_id not in locations:
                    raise LocationNotFound(unit.location_id)

        for sku in deleted_products:
            if any(u.product_sku == sku for u in units.values()):
                raise ReferencedEntity("product", sku, "inventory units still reference it")
        for location_id in deleted_locations:
            if any(u.location_id == location_id for u in units.values()):
                raise ReferencedEntity("location", location_id, "it still holds inventory units")

        if any(r is not _DELETED for r in changes.get("locations", {}).values()):
            locations = self._post_image(changes, "locations")
            seen_codes: set[str] = set()
            seen_coordinates: set[Coordinate] = set()
            for loc in locations.values():
                if loc.coordinate in seen_coordinates:
                    raise ValidationError(f"Location {loc.coordinate} already exists")
                seen_coordinates.add(loc.coordinate)
                if loc.scan_code is not None:
                    if loc.scan_code in seen_codes:
                        raise ValidationError(f"Scan code '{loc.scan_code}' is already in use")
                    seen_codes.add(loc.scan_code)


class _TableView:
    """One table as seen from inside a unit of work."""

    def __init__(self, store: MemoryStore, table: str) -> None:
        self._store = store
        self._table = table
        self._pending: dict[Hashable, Any] = {}
        self._bases: dict[Hashable, Any] = {}

    def get(self, key: Hashable) -> Any:
        if key in self._pending:
            row = self._pending[key]
            return None if row is _DELETED else row
        row = self._store.read(self._table, key)
        self._bases[key] = copy.deepcopy(row)
        return row

    def rows(self) -> list[Any]:
        merged = self._store.snapshot(self._table)
        for key, row in copy.deepcopy(merged).items():
            if key not in self._pending:
                self._bases.setdefault(key, row)
        for key, row in self._pending.items():
            if row is _DELETED:
                merged.pop(key, None)
            else:
                merged[key] = row
        return list(merged.values())

    def put(self, key: Hashable, row: Any) -> None:
        self._pending[key] = row

    def remove(self, key: Hashable) -> None:
        self._pending[key] = _DELETED

    def next_id(self) -> int:
        return self._store.next_id(self._table)

    def changes(self) -> dict[Hashable, Any]:
        return self._pending

    def bases(self) -> dict[Hashable, Any]:
        return {key: self._bases[key] for key in self._pending if key in self._bases}


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class MemoryProductRepository(ProductRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def get_by_sku(self, sku: str) -> Product | None:
        return self._view.get(sku)

    def get_many(self, skus: Iterable[str]) -> dict[str, Product]:
        found: dict[str, Product] = {}
        for sku in set(skus):
            product = self._view.get(sku)
            if product is not None:
                found[sku] = product
        return found

    def list_all(self) -> list[Product]:
        return sorted(self._view.rows(), key=lambda p: p.sku)

    def save(self, product: Product) -> None:
        self._view.put(product.sku, product)

    def delete(self, sku: str) -> None:
        self._view.remove(sku)


class MemoryLocationRepository(LocationRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def get_by_id(self, location_id: int) -> Location | None:
        return self._view.get(location_id)

    def get_by_scan_code(self, scan_code: str) -> Location | None:
        return self._find(lambda loc: loc.scan_code == scan_code)

    def get_by_coordinate(self, coordinate: Coordinate) -> Location | None:
        return self._find(lambda loc: loc.coordinate == coordinate)

    def list_all(self) -> list[Location]:
        return sorted(self._view.rows(), key=lambda loc: loc.id)

    def save(self, location: Location) -> None:
        if location.id is None:
            location.id = self._view.next_id()
        self._view.put(location.id, location)

    def delete(self, location_id: int) -> None:
        self._view.remove(location_id)

    def _find(self, predicate: Callable[[Location], bool]) -> Location | None:
        for loc in self._view.rows():
            if predicate(loc):
                return loc
        return None


class MemoryUnitRepository(UnitRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def get_by_id(self, unit_id: int) -> InventoryUnit | None:
        return self._view.get(unit_id)

    def get_by_serial(self, serial: str) -> InventoryUnit | None:
        for unit in self._view.rows():
            if unit.serial == serial:
                return unit
        return None

    def existing_serials(self, serials: Iterable[str]) -> set[str]:
        wanted = set(serials)
        return {u.serial for u in self._view.rows() if u.serial in wanted}

    def list_by_manifest(self, manifest_id: int) -> list[InventoryUnit]:
        units = [u for u in self._view.rows() if u.manifest_id == manifest_id]
        return sorted(units, key=lambda u: u.id)

    def list_eligible(self, product_sku: str) -> list[InventoryUnit]:
        units = [
            u for u in self._view.rows()
            if u.product_sku == product_sku and u.is_allocatable
        ]
        return sorted(units, key=lambda u: (u.admitted_at, u.serial))

    def any_for_product(self, product_sku: str) -> bool:
        return any(u.product_sku == product_sku for u in self._view.rows())

    def any_at_location(self, location_id: int) -> bool:
        return any(
            u.location_id == location_id and u.status.holds_location
            for u in self._view.rows()
        )

    def save(self, unit: InventoryUnit) -> None:
        if unit.id is None:
            unit.id = self._view.next_id()
        self._view.put(unit.id, unit)

    def delete(self, unit_id: int) -> None:
        self._view.remove(unit_id)


class MemoryManifestRepository(ManifestRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def get_by_id(self, manifest_id: int) -> Manifest | None:
        return self._view.get(manifest_id)

    def list_all(self) -> list[Manifest]:
        return sorted(self._view.rows(), key=lambda m: m.id, reverse=True)

    def save(self, manifest: Manifest) -> None:
        if manifest.id is None:
            manifest.id = self._view.next_id()
        self._view.put(manifest.id, manifest)

    def delete(self, manifest_id: int) -> None:
        self._view.remove(manifest_id)


class MemoryOrderRepository(OrderRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def get_by_id(self, order_id: int) -> Order | None:
        return self._view.get(order_id)

    def list_all(self) -> list[Order]:
        return sorted(self._view.rows(), key=lambda o: o.id)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._view.next_id()
        self._view.put(order.id, order)


class MemoryMovementRepository(MovementRepository):

    def __init__(self, view: _TableView) -> None:
        self._view = view

    def append(self, record: MovementRecord) -> MovementRecord:
        stored = dataclasses.replace(record, id=self._view.next_id())
        self._view.put(stored.id, stored)
        return stored

    def iter_for_unit(self, unit_id: int) -> Iterator[MovementRecord]:
        records = sorted(
            (r for r in self._view.rows() if r.unit_id == unit_id),
            key=lambda r: r.id,
        )
        yield from records


# ---------------------------------------------------------------------------
# Unit of Work
# ---------------------------------------------------------------------------


class MemoryUnitOfWork(AbstractUnitOfWork):

    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._held: list[Hashable] = []
        self._reset()

    def _reset(self) -> None:
        self._views = {name: _TableView(self._store, name) for name in TABLES}
        self.products = MemoryProductRepository(self._views["products"])
        self.locations = MemoryLocationRepository(self._views["locations"])
        self.units = MemoryUnitRepository(self._views["units"])
        self.manifests = MemoryManifestRepository(self._views["manifests"])
        self.orders = MemoryOrderRepository(self._views["orders"])
        self.movements = MemoryMovementRepository(self._views["movements"])

    def __enter__(self) -> MemoryUnitOfWork:
        self._reset()
        self._store.refresh()
        return self

    def lock_units(self, units: Iterable[InventoryUnit]) -> dict[int, InventoryUnit]:
        by_id = {u.id: u for u in units}
        ordered = sorted(by_id.values(), key=lambda u: (u.serial, u.id))
        keys = [("unit", u.id) for u in ordered if ("unit", u.id) not in self._held]
        self._held.extend(self._store.locks.acquire(keys))
        self._store.refresh()

        fresh: dict[int, InventoryUnit] = {}
        for unit in ordered:
            current = self.units.get_by_id(unit.id)
            if current is not None:
                fresh[unit.id] = current
        return fresh

    def commit(self) -> None:
        try:
            self._store.apply(
                {name: view.changes() for name, view in self._views.items()},
                {name: view.bases() for name, view in self._views.items()},
            )
        finally:
            self._release()
            self._reset()

    def rollback(self) -> None:
        self._release()
        self._reset()

    def _release(self) -> None:
        held, self._held = self._held, []
        self._store.locks.release(held)

