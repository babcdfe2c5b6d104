"""Selectors for the stock kernel (read side)."""

from stock_kernel.selectors.integrity_selector import IntegrityReport, IntegritySelector
from stock_kernel.selectors.summary_selector import SummarySelector

__all__ = [
    "IntegrityReport",
    "IntegritySelector",
    "SummarySelector",
]
