"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each class carries a machine-readable ``code`` plus the offending identifiers
as attributes, so callers never have to parse message text.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    code: str = "DOMAIN_ERROR"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "VALIDATION_ERROR"


# --- Not found ----------------------------------------------------------------


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"
    entity: str = "Entity"

    def __init__(self, key: object, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"{self.entity} not found: {key!r}")


class UnitNotFound(EntityNotFoundError):
    entity = "Unit"


class LocationNotFound(EntityNotFoundError):
    entity = "Location"


class ProductNotFound(EntityNotFoundError):
    entity = "Product"


class ManifestNotFound(EntityNotFoundError):
    entity = "Manifest"


class OrderNotFound(EntityNotFoundError):
    entity = "Order"


# --- State and stock ----------------------------------------------------------


class InvalidState(DomainException):
    """An operation was attempted from an illegal status."""

    code = "INVALID_STATE"

    def __init__(self, message: str, *, subject: object = None, status: str | None = None) -> None:
        self.subject = subject
        self.status = status
        super().__init__(message)


class UnitUnavailable(DomainException):
    """The unit cannot be allocated (taken, unplaced, or retired)."""

    code = "UNIT_UNAVAILABLE"

    def __init__(self, serial: str, status: str) -> None:
        self.serial = serial
        self.status = status
        super().__init__(f"Unit {serial} is not available for allocation (status={status})")


class InsufficientQuantity(DomainException):
    """A Measured unit does not hold enough remaining quantity."""

    code = "INSUFFICIENT_QUANTITY"

    def __init__(self, serial: str, requested: object, remaining: object) -> None:
        self.serial = serial
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Insufficient quantity on unit {serial} "
            f"(need {requested}, have {remaining} remaining)"
        )


# --- Manifest admission -------------------------------------------------------


class DuplicateSerial(DomainException):
    code = "DUPLICATE_SERIAL"

    def __init__(self, serials: list[str]) -> None:
        self.serials = list(serials)
        super().__init__(f"Duplicate serial(s): {', '.join(self.serials)}")


class EmptyManifest(DomainException):
    """No manifest line could be admitted."""

    code = "EMPTY_MANIFEST"

    def __init__(self, skipped_skus: list[str]) -> None:
        self.skipped_skus = list(skipped_skus)
        detail = f" Unknown SKUs: {', '.join(self.skipped_skus)}" if self.skipped_skus else ""
        super().__init__(f"Manifest has no admissible lines.{detail}")


# --- Referential and concurrency ----------------------------------------------


class ReferencedEntity(DomainException):
    """Delete blocked because dependent records still exist."""

    code = "REFERENCED_ENTITY"

    def __init__(self, entity: str, key: object, reason: str) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"Cannot delete {entity} {key!r}: {reason}")


class Contention(DomainException):
    """Row locks could not be acquired within the retry budget."""

    code = "CONTENTION"

    def __init__(self, keys: list[object], attempts: int) -> None:
        self.keys = list(keys)
        self.attempts = attempts
        super().__init__(
            f"Could not lock {len(self.keys)} record(s) after {attempts} attempt(s); retry the operation"
        )


class StaleWrite(Contention):
    """Another transaction committed a record after this one read it."""

    def __init__(self, keys: list[object]) -> None:
        self.keys = list(keys)
        self.attempts = 1
        DomainException.__init__(
            self,
            f"{len(self.keys)} record(s) changed since they were read; retry the operation",
        )


class ManualReviewRequired(DomainException):
    """Cancellation found downstream effects it must not reconcile on its own."""

    code = "MANUAL_REVIEW_REQUIRED"

    def __init__(self, order_id: int, reasons: list[str]) -> None:
        self.order_id = order_id
        self.reasons = list(reasons)
        super().__init__(
            f"Order #{order_id} flagged for manual review: {'; '.join(self.reasons)}"
        )
