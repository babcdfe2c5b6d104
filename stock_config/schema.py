"""
StockConfig schema.

The parsed, validated form of a configuration set.  The loader builds
these from YAML; bootstrap() turns them into kernel wiring.  Nothing in
here touches files or the environment.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SCAN_MIN_LENGTH = 7
DEFAULT_SEQUENCE_WIDTH = 4
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class CategorySeed:
    """A category installed on first start if missing."""

    name: str
    prefix_code: str


@dataclass(frozen=True)
class OperatorAccount:
    """An operator allowed to sign in to the console."""

    email: str
    password_hash: str  # werkzeug hash, from scripts.hash_password


@dataclass(frozen=True)
class StockConfig:
    """Runtime configuration for one deployment."""

    config_id: str
    database_url: str
    log_level: str = "INFO"
    scan_min_length: int = DEFAULT_SCAN_MIN_LENGTH
    sequence_width: int = DEFAULT_SEQUENCE_WIDTH
    include_sold_history: bool = True
    default_categories: tuple[CategorySeed, ...] = ()
    operators: tuple[OperatorAccount, ...] = ()
    checksum: str = ""

    def operator_hashes(self) -> dict[str, str]:
        return {op.email: op.password_hash for op in self.operators}
