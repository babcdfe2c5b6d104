"""
Aggregates -- pure statistics over ledger snapshots.

Every figure is recomputed from the units and records passed in; nothing
here holds state, so totals can never drift from the ledgers.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from stock_kernel.domain.values import Category, SoldRecord, StockUnit


def total_active_value(units: Iterable[StockUnit]) -> Decimal:
    return sum((u.purchase_price for u in units), Decimal("0"))


def total_sold_value(records: Iterable[SoldRecord]) -> Decimal:
    return sum((r.sale_price_basis for r in records), Decimal("0"))


def count_by_category(units: Iterable[StockUnit], category_name: str) -> int:
    return sum(1 for u in units if u.category == category_name)


def count_sold_by_category_prefix(records: Iterable[SoldRecord], prefix: str) -> int:
    """
    Sold records whose identifier starts with ``prefix``.

    Sold records do not keep their category, so the prefix code is the only
    link back to it.  A one-letter code also matches two-letter codes that
    start with the same letter.
    """
    return sum(1 for r in records if r.id.startswith(prefix))


@dataclass(frozen=True)
class CategoryCounts:
    """Stock and sold unit counts for one category."""

    name: str
    prefix_code: str
    in_stock: int
    sold: int


@dataclass(frozen=True)
class InventorySummary:
    """Dashboard figures derived from one pair of ledger snapshots."""

    total_active_value: Decimal
    total_sold_value: Decimal
    active_units: int
    sold_units: int
    categories: tuple[CategoryCounts, ...]

    def for_category(self, name: str) -> CategoryCounts | None:
        for counts in self.categories:
            if counts.name == name:
                return counts
        return None


def build_summary(
    categories: Sequence[Category],
    units: Sequence[StockUnit],
    records: Sequence[SoldRecord],
) -> InventorySummary:
    return InventorySummary(
        total_active_value=total_active_value(units),
        total_sold_value=total_sold_value(records),
        active_units=len(units),
        sold_units=len(records),
        categories=tuple(
            CategoryCounts(
                name=c.name,
                prefix_code=c.prefix_code,
                in_stock=count_by_category(units, c.name),
                sold=count_sold_by_category_prefix(records, c.prefix_code),
            )
            for c in categories
        ),
    )
