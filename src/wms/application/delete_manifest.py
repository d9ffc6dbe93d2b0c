"""Application service: Delete Manifest use case.

Deletes the manifest together with its units, as one transaction.
Refused as soon as any unit has left quarantine: placed, dispatched or
retired stock has history that must not disappear.
"""

from __future__ import annotations

from wms.domain.exceptions import ManifestNotFound, ReferencedEntity
from wms.domain.model.status import UnitStatus
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class DeleteManifestHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, manifest_id: int) -> int:
        """Delete the manifest and return how many units went with it."""
        with self._uow_factory() as uow:
            if uow.manifests.get_by_id(manifest_id) is None:
                raise ManifestNotFound(manifest_id)

            units = uow.lock_units(uow.units.list_by_manifest(manifest_id))
            progressed = sorted(
                u.serial for u in units.values() if u.status is not UnitStatus.QUARANTINE
            )
            if progressed:
                raise ReferencedEntity(
                    "manifest",
                    manifest_id,
                    f"units already past quarantine: {', '.join(progressed)}",
                )

            for unit_id in units:
                uow.units.delete(unit_id)
            uow.manifests.delete(manifest_id)
            uow.commit()

        logger.info("Manifest deleted", extra={"manifest_id": manifest_id, "units": len(units)})
        return len(units)
