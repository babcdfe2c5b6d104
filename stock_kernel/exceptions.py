"""
Typed Exception Hierarchy for the Stock Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers must be able to tell a mistyped brand/model apart from a duplicate
identifier or a half-finished checkout without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - RIGHT way:
    try:
        checkout.checkout(raw_scan)
    except RecordNotFoundError as e:
        console.reject(f"No unit {e.key} in stock")
    except InconsistentLedgerError as e:
        alert_operator(e.unit_id, e.stage)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StockKernelError (base)
    |
    +-- ValidationError
    |
    +-- ConflictError
    |   +-- DuplicateRecordError
    |
    +-- NotFoundError
    |   +-- RecordNotFoundError
    |   +-- CategoryNotFoundError
    |
    +-- CapacityError
    |   +-- SequenceExhaustedError
    |
    +-- InconsistentLedgerError
    |
    +-- AuthError
        +-- AuthenticationError
        +-- NotAuthenticatedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                  | When Raised
--------------|-----------------------|------------------------------------------
Validation    | VALIDATION_ERROR      | Bad input to registry/generator/entities
--------------|-----------------------|------------------------------------------
Conflict      | DUPLICATE_RECORD      | Key already present in a collection
--------------|-----------------------|------------------------------------------
Not found     | RECORD_NOT_FOUND      | Key absent from a collection
              | CATEGORY_NOT_FOUND    | Category name not registered
--------------|-----------------------|------------------------------------------
Capacity      | SEQUENCE_EXHAUSTED    | No 4-digit sequence left for a prefix
--------------|-----------------------|------------------------------------------
Ledger        | INCONSISTENT_LEDGER   | Checkout recorded a sale but could
              |                       | neither remove the unit nor withdraw it
--------------|-----------------------|------------------------------------------
Auth          | AUTHENTICATION_FAILED | Wrong email/password
              | NOT_AUTHENTICATED     | Operation needs a signed-in operator

===============================================================================
HANDLING PATTERNS
===============================================================================

ValidationError and NotFoundError are recovered close to the call site
(the console prints a rejection, scan mode treats not-found as "no match
yet").  ConflictError, CapacityError and InconsistentLedgerError are hard
failures: they propagate and must never be retried-and-ignored.
"""


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STOCK_KERNEL_ERROR"


# Validation


class ValidationError(StockKernelError):
    """Input rejected before any ledger mutation."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Conflicts


class ConflictError(StockKernelError):
    """Base exception for duplicate-key conditions."""

    code: str = "CONFLICT"


class DuplicateRecordError(ConflictError):
    """
    A record with the same key already exists in the collection.

    For the ledgers this means the identifier generator or a concurrent
    writer produced a colliding id.  Never swallow it.
    """

    code: str = "DUPLICATE_RECORD"

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Record {key} already exists in {collection}")


# Not found


class NotFoundError(StockKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class RecordNotFoundError(NotFoundError):
    """Key is absent from the collection."""

    code: str = "RECORD_NOT_FOUND"

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Record {key} not found in {collection}")


class CategoryNotFoundError(NotFoundError):
    """Category name is not registered."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category not found: {name}")


# Capacity


class CapacityError(StockKernelError):
    """Base exception for exhausted identifier space."""

    code: str = "CAPACITY_EXHAUSTED"


class SequenceExhaustedError(CapacityError):
    """
    Every sequence number for a combined prefix is used.

    Truncating would collide with an existing identifier, so the operator
    must introduce a new prefix scheme instead.
    """

    code: str = "SEQUENCE_EXHAUSTED"

    def __init__(self, combined_prefix: str, width: int):
        self.combined_prefix = combined_prefix
        self.width = width
        super().__init__(
            f"Sequence space exhausted for prefix {combined_prefix!r} "
            f"({width} digits)"
        )


# Ledger consistency


class InconsistentLedgerError(StockKernelError):
    """
    Checkout appended a SoldRecord but neither removed the unit from stock
    nor withdrew the record.

    The unit snapshot is attached so an operator can reconcile both
    ledgers by hand.
    """

    code: str = "INCONSISTENT_LEDGER"

    def __init__(self, unit_id: str, stage: str, unit=None):
        self.unit_id = unit_id
        self.stage = stage
        self.unit = unit
        super().__init__(
            f"Ledger inconsistent for unit {unit_id} at stage '{stage}': "
            f"manual reconciliation required"
        )


# Authentication


class AuthError(StockKernelError):
    """Base exception for operator authentication."""

    code: str = "AUTH_ERROR"


class AuthenticationError(AuthError):
    """Credentials rejected."""

    code: str = "AUTHENTICATION_FAILED"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Authentication failed for {email}")


class NotAuthenticatedError(AuthError):
    """No operator session is active."""

    code: str = "NOT_AUTHENTICATED"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation '{operation}' requires a signed-in operator")
