"""
Exception hierarchy and structured log output of kernel errors.
"""

import json
import sys
import logging

import pytest

from stock_kernel.exceptions import (
    AuthenticationError,
    AuthError,
    CapacityError,
    CategoryNotFoundError,
    ConflictError,
    DuplicateRecordError,
    InconsistentLedgerError,
    NotAuthenticatedError,
    NotFoundError,
    RecordNotFoundError,
    SequenceExhaustedError,
    StockKernelError,
    ValidationError,
)
from stock_kernel.logging_config import LogContext, StructuredFormatter


@pytest.mark.parametrize(
    "error, parent, code",
    [
        (ValidationError("grade", "bad"), StockKernelError, "VALIDATION_ERROR"),
        (DuplicateRecordError("inventory", "HSA0001"), ConflictError, "DUPLICATE_RECORD"),
        (RecordNotFoundError("inventory", "HSA0001"), NotFoundError, "RECORD_NOT_FOUND"),
        (CategoryNotFoundError("Drone"), NotFoundError, "CATEGORY_NOT_FOUND"),
        (SequenceExhaustedError("HSA", 4), CapacityError, "SEQUENCE_EXHAUSTED"),
        (InconsistentLedgerError("HSA0001", "withdraw"), StockKernelError, "INCONSISTENT_LEDGER"),
        (AuthenticationError("a@b.c"), AuthError, "AUTHENTICATION_FAILED"),
        (NotAuthenticatedError("reset_ledgers"), AuthError, "NOT_AUTHENTICATED"),
    ],
)
def test_hierarchy_and_codes(error, parent, code):
    assert isinstance(error, parent)
    assert isinstance(error, StockKernelError)
    assert error.code == code


def test_formatter_includes_structured_exception_fields():
    try:
        raise RecordNotFoundError("inventory", "HSA0001")
    except RecordNotFoundError:
        record = logging.getLogger("stock_kernel.test").makeRecord(
            "stock_kernel.test",
            logging.ERROR,
            __file__,
            1,
            "checkout_failed",
            (),
            exc_info=sys.exc_info(),
            extra={"mode": "manual"},
        )

    with LogContext.bind(unit_id="HSA0001", operation="checkout_manual"):
        payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "checkout_failed"
    assert payload["mode"] == "manual"
    assert payload["unit_id"] == "HSA0001"
    assert payload["operation"] == "checkout_manual"
    assert payload["exc_code"] == "RECORD_NOT_FOUND"
    assert payload["exc_collection"] == "inventory"
    assert payload["exc_key"] == "HSA0001"
