"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from wms.domain.exceptions import ValidationError


@dataclass(frozen=True, order=True)
class Measure:
    """A non-negative continuous quantity (e.g. metres left on a roll).

    Uses Decimal so repeated partial cuts never drift the way floats do.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Measure amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Measure amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Measure amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Measure) -> Measure:
        return Measure(self.amount + other.amount)

    def __sub__(self, other: Measure) -> Measure:
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Measure subtraction would result in a negative amount")
        return Measure(result)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return format(self.amount.normalize(), "f")

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal) -> Measure:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Measure(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid quantity: {amount!r}") from exc

    @staticmethod
    def positive(amount: str | int | Decimal) -> Measure:
        """Like ``of`` but rejects zero: used for requested and admitted amounts."""
        measure = Measure.of(amount)
        if measure.is_zero:
            raise ValidationError("Quantity must be positive")
        return measure


ZERO = Measure(Decimal("0"))


@dataclass(frozen=True)
class Coordinate:
    """Physical warehouse address: aisle / rack / level / position."""

    aisle: str
    rack: str
    level: str
    position: str

    def __post_init__(self) -> None:
        for part in ("aisle", "rack", "level", "position"):
            value = getattr(self, part)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Location {part} is required")
            object.__setattr__(self, part, value.strip().upper())

    def __str__(self) -> str:
        return f"{self.aisle}-{self.rack}-{self.level}-{self.position}"
