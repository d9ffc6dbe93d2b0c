"""Application service: manifest queries (query).

A manifest's status is never stored; it is derived here from the
current status of its units every time it is read.
"""

from __future__ import annotations

from wms.application.dto import ManifestDTO, UnitDTO
from wms.domain.exceptions import ManifestNotFound
from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.manifest import Manifest
from wms.domain.repository.unit_of_work import UnitOfWorkFactory


def _to_dto(manifest: Manifest, units: list[InventoryUnit], with_units: bool) -> ManifestDTO:
    return ManifestDTO(
        id=manifest.id,  # type: ignore[arg-type]
        supplier=manifest.supplier,
        arrival_date=manifest.arrival_date,
        status=manifest.status_for(u.status for u in units).value,
        skipped_skus=list(manifest.skipped_skus),
        created_at=manifest.created_at,
        units=[UnitDTO.from_domain(u) for u in units] if with_units else [],
    )


class ShowManifestHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, manifest_id: int) -> ManifestDTO:
        with self._uow_factory() as uow:
            manifest = uow.manifests.get_by_id(manifest_id)
            if manifest is None:
                raise ManifestNotFound(manifest_id)
            units = uow.units.list_by_manifest(manifest_id)
        return _to_dto(manifest, units, with_units=True)


class ListManifestsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ManifestDTO]:
        with self._uow_factory() as uow:
            return [
                _to_dto(m, uow.units.list_by_manifest(m.id), with_units=False)
                for m in uow.manifests.list_all()
            ]
