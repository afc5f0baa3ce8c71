"""Unit tests for domain exceptions."""

import pytest

from partsledger.core.exceptions import (
    AllocationNotFoundError,
    ConcurrencyConflictError,
    CycleDetectedError,
    DatabaseError,
    DuplicateCodeError,
    DuplicateLocationError,
    DuplicatePartError,
    InsufficientStockError,
    InvalidLocationError,
    JobNotFoundError,
    LedgerError,
    LocationNotFoundError,
    NotFoundError,
    PartInUseError,
    PartNotFoundError,
    StorageError,
    ValidationError,
)


class TestLedgerError:
    """Tests for base LedgerError exception."""

    def test_basic_initialization(self):
        error = LedgerError("Something failed")
        assert error.message == "Something failed"
        assert error.code == "LedgerError"
        assert error.details == {}

    def test_to_dict(self):
        error = LedgerError("Boom", code="BOOM", details={"k": 1})
        assert error.to_dict() == {"error": "BOOM", "message": "Boom", "details": {"k": 1}}

    def test_is_exception(self):
        with pytest.raises(LedgerError):
            raise LedgerError("x")


class TestValidationErrors:
    def test_validation_error_details(self):
        error = ValidationError("quantity", "must be positive", -3)
        assert error.code == "VALIDATION_ERROR"
        assert error.details == {"field": "quantity", "message": "must be positive", "value": "-3"}

    def test_value_truncated(self):
        error = ValidationError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_invalid_location(self):
        error = InvalidLocationError("LOC-009", "location is inactive")
        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_LOCATION"
        assert error.details["location_code"] == "LOC-009"

    def test_cycle_detected(self):
        error = CycleDetectedError("LOC-001", "LOC-003")
        assert isinstance(error, ValidationError)
        assert error.code == "LOCATION_CYCLE"
        assert error.details["new_parent_code"] == "LOC-003"

    def test_part_in_use(self):
        error = PartInUseError("W100", 3, 1)
        assert error.code == "PART_IN_USE"
        assert error.details["entry_count"] == 3
        assert error.details["allocation_count"] == 1


class TestStockAndLookupErrors:
    def test_insufficient_stock(self):
        error = InsufficientStockError("W100", 12, 8)
        assert error.code == "INSUFFICIENT_STOCK"
        assert error.details == {"part_code": "W100", "requested": 12, "available": 8}
        assert "requested 12" in error.message

    @pytest.mark.parametrize(
        "error,code",
        [
            (PartNotFoundError("W100"), "PART_NOT_FOUND"),
            (LocationNotFoundError("LOC-001"), "LOCATION_NOT_FOUND"),
            (AllocationNotFoundError(42), "ALLOCATION_NOT_FOUND"),
            (JobNotFoundError("J-1"), "JOB_NOT_FOUND"),
        ],
    )
    def test_not_found_family(self, error: NotFoundError, code: str):
        assert isinstance(error, NotFoundError)
        assert error.code == code

    @pytest.mark.parametrize(
        "error,code",
        [
            (DuplicatePartError("W100"), "DUPLICATE_PART"),
            (DuplicateLocationError("LOC-001"), "DUPLICATE_LOCATION"),
        ],
    )
    def test_duplicate_family(self, error: DuplicateCodeError, code: str):
        assert isinstance(error, DuplicateCodeError)
        assert error.code == code


class TestStorageErrors:
    def test_database_error(self):
        error = DatabaseError("insert", "disk I/O error")
        assert isinstance(error, StorageError)
        assert error.details == {"operation": "insert", "error": "disk I/O error"}

    def test_concurrency_conflict(self):
        error = ConcurrencyConflictError("begin", "database is locked")
        assert isinstance(error, StorageError)
        assert error.code == "CONCURRENCY_CONFLICT"
