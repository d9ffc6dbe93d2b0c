"""Order aggregate: an outbound dispatch of inventory units to a customer.

The Order owns its lines. Unit-side effects (decrementing quantities,
dispatching, restoring) are coordinated by the allocation service; the
Order only guards its own state transitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from wms.domain.exceptions import InvalidState, ValidationError
from wms.domain.model.value_objects import Measure


class OrderStatus(Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class OrderLine:
    """One unit taken by an order.

    ``quantity`` is only set for Measured units. ``depleted`` records
    whether this line emptied the unit, and ``location_id`` where the
    unit sat when it was taken; cancellation relies on both to tell
    whether anything happened to the stock since.
    """

    unit_id: int
    serial: str
    product_sku: str
    quantity: Measure | None
    depleted: bool
    location_id: int | None


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ORDER_LINES = 200


@dataclass
class Order:
    """Aggregate root for dispatch orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` does no validation, so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: str
    lines: list[OrderLine]
    notes: str = ""
    status: OrderStatus = OrderStatus.PROCESSING
    dispatch_date: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    review_reasons: list[str] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: str,
        lines: list[OrderLine],
        created_at: datetime,
        notes: str | None = None,
    ) -> Order:
        """Create a committed dispatch order, enforcing all invariants."""
        if not customer_id or not str(customer_id).strip():
            raise ValidationError("Customer is required")

        if not lines:
            raise ValidationError("Order must contain at least one line")

        if len(lines) > MAX_ORDER_LINES:
            raise ValidationError(f"Maximum {MAX_ORDER_LINES} lines per order")

        return Order(
            id=None,
            customer_id=str(customer_id).strip(),
            lines=list(lines),
            notes=(notes or "").strip(),
            status=OrderStatus.PROCESSING,
            dispatch_date=created_at,
            created_at=created_at,
        )

    # --- State transitions ----------------------------------------------------

    def complete(self) -> None:
        """Transition PROCESSING -> COMPLETED once the shipment left."""
        if self.status != OrderStatus.PROCESSING:
            raise InvalidState(
                f"Cannot complete order #{self.id}: current status is {self.status.value}, "
                f"expected PROCESSING",
                subject=self.id,
                status=self.status.value,
            )
        self.status = OrderStatus.COMPLETED

    def ensure_cancellable(self) -> None:
        if not self.is_live:
            raise InvalidState(
                f"Order #{self.id} is already cancelled",
                subject=self.id,
                status=self.status.value,
            )

    def cancel(self) -> None:
        """Transition any live status -> CANCELLED.

        Unit reversal must happen *before* calling this (coordinated by
        the application handler via the allocation service).
        """
        self.ensure_cancellable()
        self.status = OrderStatus.CANCELLED
        self.review_reasons = []

    def flag_for_review(self, reasons: list[str]) -> None:
        self.review_reasons = list(reasons)

    # --- Computed properties --------------------------------------------------

    @property
    def needs_review(self) -> bool:
        return bool(self.review_reasons)

    @property
    def is_live(self) -> bool:
        return self.status != OrderStatus.CANCELLED
