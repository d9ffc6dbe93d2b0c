"""Product aggregate.

Products are catalog reference data. Their unit kind decides how every
InventoryUnit of the product is tracked: by remaining measure, or as a
single indivisible piece.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import Measure


class UnitKind(Enum):
    MEASURED = "MEASURED"  # e.g. fabric rolls, consumed by length
    DISCRETE = "DISCRETE"  # e.g. IBC tanks, consumed whole


@dataclass
class Product:
    """A product in the catalog, identified by its immutable SKU."""

    sku: str
    name: str
    unit_kind: UnitKind
    default_quantity: Measure | None = None
    description: str | None = None
    is_active: bool = True

    @staticmethod
    def create(
        sku: str,
        name: str,
        unit_kind: UnitKind,
        default_quantity: Measure | None = None,
        description: str | None = None,
    ) -> Product:
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        product = Product(
            sku=sku.strip(),
            name=name.strip(),
            unit_kind=unit_kind,
            description=description,
        )
        product.set_default_quantity(default_quantity)
        return product

    @property
    def is_measured(self) -> bool:
        return self.unit_kind is UnitKind.MEASURED

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        self.name = name.strip()

    def set_default_quantity(self, quantity: Measure | None) -> None:
        if quantity is None:
            self.default_quantity = None
            return
        if not self.is_measured:
            raise ValidationError(
                f"Discrete product {self.sku} does not take a default quantity"
            )
        if quantity.is_zero:
            raise ValidationError("Default quantity must be positive")
        self.default_quantity = quantity
