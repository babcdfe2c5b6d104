"""CLI views: read-only screens over the kernel selectors and ledgers."""

from scripts.cli.views.reports import show_dashboard, show_integrity
from scripts.cli.views.stock import show_sold, show_stock, show_unit

__all__ = [
    "show_dashboard",
    "show_integrity",
    "show_sold",
    "show_stock",
    "show_unit",
]
