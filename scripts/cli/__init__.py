"""
Operator console for the unit stock ledger.

Receive units, check them out by id or scanner, review stock and sold
history, and run admin tasks.

Entry point: scripts/interactive.py or python -m scripts.cli
"""

from scripts.cli.main import main

__all__ = ["main"]
