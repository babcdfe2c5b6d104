"""
Module: stock_kernel.selectors.base
Responsibility: Abstract base class for all read-only selectors.  Selectors
    form the "Q" side of the kernel, deriving reports from ledger snapshots
    without mutation capability.
Architecture position: Kernel > Selectors.  May import from store/, domain/
    and the ledger services' read methods.

Invariants enforced:
    - Read-only access: selectors only call RecordStore.select().
    - DERIVED_AGGREGATES: every call reads fresh snapshots; there are NO
      stored or cached totals.
    - DTO return convention: selectors return frozen dataclasses.
"""

from abc import ABC

from stock_kernel.store.base import RecordStore


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Non-goals:
        - BaseSelector does NOT define any query methods; subclasses
          implement the specific reports.
    """

    def __init__(self, store: RecordStore):
        self.store = store
