"""
Module: stock_kernel.selectors.summary_selector
Responsibility: Dashboard figures (stock value, sold value, per-category
    counts) computed from fresh snapshots of the category registry and both
    ledgers.
Architecture position: Kernel > Selectors.
"""

from decimal import Decimal

from stock_kernel.domain.aggregates import (
    InventorySummary,
    build_summary,
    total_active_value,
    total_sold_value,
)
from stock_kernel.selectors.base import BaseSelector
from stock_kernel.services.category_registry import CategoryRegistry
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import RecordStore


class SummarySelector(BaseSelector):
    def __init__(self, store: RecordStore):
        super().__init__(store)
        self._registry = CategoryRegistry(store)
        self._stock = StockLedger(store)
        self._sold = SoldLedger(store)

    def summary(self) -> InventorySummary:
        return build_summary(
            self._registry.list(),
            self._stock.all(),
            self._sold.all(),
        )

    def active_value(self) -> Decimal:
        return total_active_value(self._stock.all())

    def sold_value(self) -> Decimal:
        return total_sold_value(self._sold.all())
