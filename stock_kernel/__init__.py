"""
Stock Kernel

Unit-level stock tracking with:
- Category-scoped sequential identifiers
- A Stock Ledger and a Sold Ledger with single-ledger membership
- Guarded checkout (manual and scan)
- Aggregates derived on demand from ledger contents
"""

__version__ = "0.1.0"
