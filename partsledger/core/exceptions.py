"""
Domain exceptions for the parts ledger.

Every operation either succeeds completely or raises one of these with
the ledger and catalog left exactly as they were before the call.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all parts ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LedgerError):
    """Malformed or constraint-violating input, rejected before any write."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidLocationError(ValidationError):
    """Transfer or placement references an unusable storage location."""

    def __init__(self, location_code: str | None, reason: str):
        super().__init__(field="location", message=reason, value=location_code)
        self.code = "INVALID_LOCATION"
        self.details["location_code"] = location_code


class CycleDetectedError(ValidationError):
    """Re-parenting a location would make it its own ancestor."""

    def __init__(self, location_code: str, new_parent_code: str):
        super().__init__(
            field="parent_code",
            message=(
                f"Location '{location_code}' cannot be moved under "
                f"'{new_parent_code}': it would become its own ancestor"
            ),
            value=new_parent_code,
        )
        self.code = "LOCATION_CYCLE"
        self.details.update(
            {"location_code": location_code, "new_parent_code": new_parent_code}
        )


class PartInUseError(ValidationError):
    """Part is referenced by ledger entries or allocations and cannot be deleted."""

    def __init__(self, part_code: str, entry_count: int, allocation_count: int):
        super().__init__(
            field="part_code",
            message=(
                f"Part '{part_code}' is referenced by {entry_count} ledger "
                f"entries and {allocation_count} allocations"
            ),
            value=part_code,
        )
        self.code = "PART_IN_USE"
        self.details.update(
            {"entry_count": entry_count, "allocation_count": allocation_count}
        )


# Stock Exceptions
class InsufficientStockError(LedgerError):
    """Requested consumption cannot be fully priced from purchase lots."""

    def __init__(self, part_code: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {part_code}: requested {requested}, "
            f"available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "part_code": part_code,
                "requested": requested,
                "available": available,
            },
        )


# Existence Exceptions
class DuplicateCodeError(LedgerError):
    """An entity with the same code already exists."""

    pass


class DuplicatePartError(DuplicateCodeError):
    """Part code already exists in the catalog."""

    def __init__(self, part_code: str):
        super().__init__(
            f"Part already exists: {part_code}",
            code="DUPLICATE_PART",
            details={"part_code": part_code},
        )


class DuplicateLocationError(DuplicateCodeError):
    """Location code already exists."""

    def __init__(self, location_code: str):
        super().__init__(
            f"Location already exists: {location_code}",
            code="DUPLICATE_LOCATION",
            details={"location_code": location_code},
        )


class NotFoundError(LedgerError):
    """Referenced entity does not exist."""

    pass


class PartNotFoundError(NotFoundError):
    """Part not found in the catalog."""

    def __init__(self, part_code: str):
        super().__init__(
            f"Part not found: {part_code}",
            code="PART_NOT_FOUND",
            details={"part_code": part_code},
        )


class LocationNotFoundError(NotFoundError):
    """Storage location not found."""

    def __init__(self, location_code: str):
        super().__init__(
            f"Location not found: {location_code}",
            code="LOCATION_NOT_FOUND",
            details={"location_code": location_code},
        )


class AllocationNotFoundError(NotFoundError):
    """Job part allocation not found."""

    def __init__(self, allocation_id: int):
        super().__init__(
            f"Allocation not found: {allocation_id}",
            code="ALLOCATION_NOT_FOUND",
            details={"allocation_id": allocation_id},
        )


class JobNotFoundError(NotFoundError):
    """Job is unknown to the host application."""

    def __init__(self, job_id: str):
        super().__init__(
            f"Job not found: {job_id}",
            code="JOB_NOT_FOUND",
            details={"job_id": job_id},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConcurrencyConflictError(StorageError):
    """The store could not serialize this transaction; retry with backoff."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Concurrency conflict during {operation}: {error}",
            code="CONCURRENCY_CONFLICT",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
