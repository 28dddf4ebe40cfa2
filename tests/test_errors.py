"""Tests for store error translation."""

import pytest
from pymongo.errors import (
    AutoReconnect,
    BulkWriteError,
    DuplicateKeyError,
    ExecutionTimeout,
    OperationFailure,
    ServerSelectionTimeoutError,
    WriteError,
)

from src.errors import (
    NotFoundError,
    StoreUnavailableError,
    ValidationRejectedError,
    translate_store_errors,
)


class TestTranslateStoreErrors:
    @pytest.mark.parametrize(
        "error",
        [
            ServerSelectionTimeoutError("no servers"),
            AutoReconnect("connection reset"),
            ExecutionTimeout("operation exceeded time limit", 50),
        ],
    )
    def test_unavailable(self, error):
        """Test transport and timeout failures."""
        with pytest.raises(StoreUnavailableError) as exc_info:
            with translate_store_errors("find"):
                raise error

        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize(
        "error",
        [
            WriteError("Document failed validation", code=121),
            DuplicateKeyError("E11000 duplicate key error", code=11000),
        ],
    )
    def test_validation_rejected(self, error):
        """Test schema and uniqueness violations."""
        with pytest.raises(ValidationRejectedError):
            with translate_store_errors("insert"):
                raise error

    @pytest.mark.parametrize("code", [121, 11000])
    def test_find_and_modify_rejection(self, code):
        """Test findAndModify failures carrying a rejection code."""
        with pytest.raises(ValidationRejectedError):
            with translate_store_errors("add_review.atomic"):
                raise OperationFailure("Document failed validation", code=code)

    def test_bulk_write_rejection(self):
        """Test a bulk insert failing only on duplicate keys or validation."""
        error = BulkWriteError(
            {"writeErrors": [{"index": 1, "code": 11000, "errmsg": "E11000 duplicate key error"}], "nInserted": 1}
        )

        with pytest.raises(ValidationRejectedError) as exc_info:
            with translate_store_errors("load_carts"):
                raise error

        assert exc_info.value.__cause__ is error

    def test_bulk_write_mixed_errors_propagate(self):
        """Test a bulk failure with an unrelated write error is re-raised untouched."""
        error = BulkWriteError(
            {"writeErrors": [{"index": 0, "code": 11000, "errmsg": "dup"}, {"index": 1, "code": 2, "errmsg": "bad value"}]}
        )

        with pytest.raises(BulkWriteError):
            with translate_store_errors("load_carts"):
                raise error

    def test_other_write_errors_propagate(self):
        """Test unrelated write errors are re-raised untouched."""
        error = WriteError("something else", code=2)

        with pytest.raises(WriteError) as exc_info:
            with translate_store_errors("update"):
                raise error

        assert exc_info.value is error

    def test_other_operation_failures_propagate(self):
        """Test unmapped server errors are re-raised untouched."""
        with pytest.raises(OperationFailure):
            with translate_store_errors("aggregate"):
                raise OperationFailure("bad pipeline", code=40324)

    def test_store_errors_pass_through(self):
        """Test our own errors are not rewrapped."""
        with pytest.raises(NotFoundError):
            with translate_store_errors("add_review"):
                raise NotFoundError("gone")
