"""Application service: Add Product use case."""

from __future__ import annotations

from decimal import Decimal

from wms.domain.exceptions import ValidationError
from wms.domain.model.product import Product, UnitKind
from wms.domain.model.value_objects import Measure
from wms.domain.repository.unit_of_work import UnitOfWorkFactory
from wms.logging_config import get_logger

logger = get_logger(__name__)


def parse_unit_kind(raw: str | UnitKind) -> UnitKind:
    if isinstance(raw, UnitKind):
        return raw
    try:
        return UnitKind(str(raw).strip().upper())
    except ValueError as exc:
        allowed = ", ".join(k.value for k in UnitKind)
        raise ValidationError(f"Unknown unit kind {raw!r} (expected one of {allowed})") from exc


class AddProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        sku: str,
        name: str,
        unit_kind: str | UnitKind,
        default_quantity: str | Decimal | None = None,
        description: str | None = None,
    ) -> Product:
        """Add a new product to the catalog."""
        product = Product.create(
            sku=sku,
            name=name,
            unit_kind=parse_unit_kind(unit_kind),
            default_quantity=None if default_quantity is None else Measure.positive(default_quantity),
            description=description,
        )

        with self._uow_factory() as uow:
            if uow.products.get_by_sku(product.sku) is not None:
                raise ValidationError(f"Product '{product.sku}' already exists")
            uow.products.save(product)
            uow.commit()

        logger.info("Product added", extra={"sku": product.sku, "unit_kind": product.unit_kind.value})
        return product
