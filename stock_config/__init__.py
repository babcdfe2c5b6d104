"""
stock_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component may read configuration
    files or environment variables directly.  ``bootstrap()`` wires a
    kernel InventoryApp from the resulting ``StockConfig``.

Architecture position:
    Configuration -- sits above ``stock_kernel``.  The kernel MUST NEVER
    import from ``stock_config``.

Failure modes:
    - ``FileNotFoundError`` -- the selected configuration file is missing.
    - ``ValueError`` -- schema validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``STOCK_CONFIG_TRACE`` log entry with the config_id, checksum and
    whether the database URL was overridden from the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from stock_config.loader import compute_checksum, load_config
from stock_config.schema import CategorySeed, OperatorAccount, StockConfig
from stock_kernel.app import InventoryApp, create_app
from stock_kernel.domain.clock import Clock
from stock_kernel.logging_config import configure_logging
from stock_kernel.services.checkout_service import ConfirmCheckout
from stock_kernel.store import open_store

_logger = logging.getLogger("stock_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "STOCK_CONFIG_PATH"
DATABASE_URL_ENV = "STOCK_DATABASE_URL"

__all__ = [
    "CategorySeed",
    "OperatorAccount",
    "StockConfig",
    "bootstrap",
    "compute_checksum",
    "get_active_config",
    "load_config",
]


def get_active_config(path: Path | str | None = None) -> StockConfig:
    """The ONLY public configuration entrypoint.

    Resolution order for the file: ``path``, then ``STOCK_CONFIG_PATH``,
    then the bundled ``sets/default.yaml``.  ``STOCK_DATABASE_URL``, when
    set, replaces ``database_url``.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        ValueError: If the file fails validation.
    """
    resolved = Path(path or os.environ.get(CONFIG_PATH_ENV) or _DEFAULT_CONFIG_PATH)
    config = load_config(resolved)

    url_override = os.environ.get(DATABASE_URL_ENV)
    if url_override:
        config = replace(config, database_url=url_override)

    _logger.info(
        "STOCK_CONFIG_TRACE",
        extra={
            "trace_type": "STOCK_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_path": str(resolved),
            "checksum": config.checksum,
            "database_url_overridden": bool(url_override),
            "category_seed_count": len(config.default_categories),
            "operator_count": len(config.operators),
        },
    )
    return config


def bootstrap(
    config: StockConfig,
    *,
    confirm: ConfirmCheckout | None = None,
    clock: Clock | None = None,
) -> InventoryApp:
    """
    Build a ready-to-use InventoryApp from ``config``.

    Configures logging, opens the store (creating tables for SQL URLs)
    and installs the configured default categories that are missing.
    """
    configure_logging(level=config.log_level)
    store = open_store(config.database_url)
    app = create_app(
        store,
        confirm=confirm,
        clock=clock,
        operators=config.operator_hashes(),
        sequence_width=config.sequence_width,
        include_sold_history=config.include_sold_history,
        scan_min_length=config.scan_min_length,
    )
    app.registry.ensure_seeded(
        (seed.name, seed.prefix_code) for seed in config.default_categories
    )
    return app
