"""Application service: Ingest Manifest use case.

Turns the parsed lines of a supplier manifest into quarantined inventory
units, all tied to one new Manifest record.

Steps:
1. Validate the lines themselves (blank fields, serials repeated inside
   the manifest).
2. Resolve every SKU in one batch lookup. Lines with unknown SKUs are
   skipped and reported back; if nothing is left the call fails.
3. Reject serials that already belong to stored units.
4. Create the Manifest and one unit per admissible line in a single
   unit of work, so a failure halfway through leaves no orphaned
   manifest behind.
"""

from __future__ import annotations

from collections import Counter
from datetime import date

from wms.application.dto import IngestResultDTO, ManifestLineSpec
from wms.domain.clock import Clock, SystemClock
from wms.domain.exceptions import DuplicateSerial, EmptyManifest, ValidationError
from wms.domain.model.inventory import InventoryUnit
from wms.domain.model.manifest import Manifest
from wms.domain.model.value_objects import Measure
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


class IngestManifestHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    def handle(
        self,
        supplier: str | None,
        arrival_date: date | None,
        lines: list[ManifestLineSpec],
    ) -> IngestResultDTO:
        now = self._clock.now()
        lines = self._normalize(lines)
        if not lines:
            raise EmptyManifest([])

        repeated = sorted(s for s, n in Counter(line.serial for line in lines).items() if n > 1)
        if repeated:
            raise DuplicateSerial(repeated)

        with self._uow_factory() as uow:
            products = uow.products.get_many(line.sku for line in lines)
            skipped = list(dict.fromkeys(line.sku for line in lines if line.sku not in products))
            for sku in skipped:
                logger.warning("Manifest line skipped: unknown SKU", extra={"sku": sku})

            admissible = [line for line in lines if line.sku in products]
            if not admissible:
                raise EmptyManifest(skipped)

            taken = uow.units.existing_serials(line.serial for line in admissible)
            if taken:
                raise DuplicateSerial(sorted(taken))

            manifest = Manifest.create(
                supplier=supplier,
                arrival_date=arrival_date or now.date(),
                created_at=now,
                skipped_skus=skipped,
            )
            uow.manifests.save(manifest)

            for line in admissible:
                product = products[line.sku]
                quantity = None
                if product.is_measured and line.quantity not in (None, ""):
                    quantity = Measure.positive(line.quantity)
                unit = InventoryUnit.admit(
                    serial=line.serial,
                    product=product,
                    manifest_id=manifest.id,
                    admitted_at=now,
                    quantity=quantity,
                    notes=f"Admitted from manifest #{manifest.id} - SKU: {line.sku}",
                )
                uow.units.save(unit)

            uow.commit()

        logger.info(
            "Manifest ingested",
            extra={
                "manifest_id": manifest.id,
                "admitted": len(admissible),
                "skipped_skus": skipped,
            },
        )
        return IngestResultDTO(
            manifest_id=manifest.id,  # type: ignore[arg-type]
            admitted_count=len(admissible),
            skipped_skus=skipped,
        )

    @staticmethod
    def _normalize(lines: list[ManifestLineSpec]) -> list[ManifestLineSpec]:
        normalized: list[ManifestLineSpec] = []
        for number, line in enumerate(lines, start=1):
            serial = (line.serial or "").strip()
            sku = (line.sku or "").strip()
            if not serial:
                raise ValidationError(f"Manifest line {number}: serial is required")
            if not sku:
                raise ValidationError(f"Manifest line {number}: SKU is required")
            normalized.append(ManifestLineSpec(serial=serial, sku=sku, quantity=line.quantity))
        return normalized
