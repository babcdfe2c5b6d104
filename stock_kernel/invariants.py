"""
Kernel Invariants Contract.

These invariants are structural law for the two ledgers. No configuration
toggle may switch them off.

This module exists solely to declare them explicitly. Enforcement is
distributed across the identifier generator, the record stores, the
ledgers and CheckoutService.
"""

from enum import Enum, unique


@unique
class LedgerInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel."""

    SINGLE_LEDGER_MEMBERSHIP = "single_ledger_membership"
    """An identifier lives in at most one of the Stock Ledger and the Sold
    Ledger, and at most once in each. Enforced by primary keys in both
    collections and by CheckoutService removing before appending."""

    DETERMINISTIC_IDENTIFIER = "deterministic_identifier"
    """Identifiers are prefix_code + brand prefix + zero-padded sequence,
    the sequence being one past the highest in use for that prefix.
    Enforced by domain.identifier.next_identifier."""

    SOLD_HAS_STOCK_ORIGIN = "sold_has_stock_origin"
    """Every sold record is built from a unit that was removed from stock.
    Enforced by SoldRecord.from_unit being the only checkout path."""

    DERIVED_AGGREGATES = "derived_aggregates"
    """Totals and counts are recomputed from ledger snapshots on every read.
    Enforced by domain.aggregates holding no state."""


# All invariants as a frozenset for programmatic checks.
ALL_LEDGER_INVARIANTS: frozenset[LedgerInvariant] = frozenset(LedgerInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "stock_config",
    "scripts",
)
