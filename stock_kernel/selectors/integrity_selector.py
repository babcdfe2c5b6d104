"""
Module: stock_kernel.selectors.integrity_selector
Responsibility: Detects ledger states the kernel's invariants forbid, so an
    operator can reconcile them by hand.
Architecture position: Kernel > Selectors.

Checks:
    - SINGLE_LEDGER_MEMBERSHIP: ids present in both ledgers.  Only an
      InconsistentLedgerError-style failure or a manual edit leaves these.
    - DETERMINISTIC_IDENTIFIER: stock ids that are not letters + two
      brand characters + ``sequence_width`` digits.
"""

from dataclasses import dataclass

from stock_kernel.domain.identifier import DEFAULT_SEQUENCE_WIDTH, is_well_formed
from stock_kernel.selectors.base import BaseSelector
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import RecordStore


@dataclass(frozen=True)
class IntegrityReport:
    """Result of one integrity check."""

    in_both_ledgers: tuple[str, ...]
    malformed_ids: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return not self.in_both_ledgers and not self.malformed_ids


class IntegritySelector(BaseSelector):
    def __init__(self, store: RecordStore, sequence_width: int = DEFAULT_SEQUENCE_WIDTH):
        super().__init__(store)
        self.sequence_width = sequence_width
        self._stock = StockLedger(store)
        self._sold = SoldLedger(store)

    def check(self) -> IntegrityReport:
        stock_ids = set(self._stock.ids())
        sold_ids = set(self._sold.ids())
        return IntegrityReport(
            in_both_ledgers=tuple(sorted(stock_ids & sold_ids)),
            malformed_ids=tuple(
                sorted(i for i in stock_ids if not is_well_formed(i, self.sequence_width))
            ),
        )
