"""
Pure domain layer: entities, identifier generation, aggregates, clock.

Nothing in this package performs I/O.
"""

from stock_kernel.domain.aggregates import (
    CategoryCounts,
    InventorySummary,
    build_summary,
    count_by_category,
    count_sold_by_category_prefix,
    total_active_value,
    total_sold_value,
)
from stock_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stock_kernel.domain.identifier import (
    brand_prefix,
    combined_prefix,
    next_identifier,
    parse_sequence,
)
from stock_kernel.domain.values import (
    Category,
    Grade,
    SoldRecord,
    StockUnit,
    StockUnitPatch,
)

__all__ = [
    "Category",
    "CategoryCounts",
    "Clock",
    "DeterministicClock",
    "Grade",
    "InventorySummary",
    "SoldRecord",
    "StockUnit",
    "StockUnitPatch",
    "SystemClock",
    "brand_prefix",
    "build_summary",
    "combined_prefix",
    "count_by_category",
    "count_sold_by_category_prefix",
    "next_identifier",
    "parse_sequence",
    "total_active_value",
    "total_sold_value",
]
