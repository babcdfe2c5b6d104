"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a frozen
``StockConfig``.  Runtime callers go through
``stock_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Every parse error raises ``ValueError`` with the offending key; no
  silent defaults for required fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed content for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing/invalid keys  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from stock_config.schema import (
    DEFAULT_SCAN_MIN_LENGTH,
    DEFAULT_SEQUENCE_WIDTH,
    LOG_LEVELS,
    CategorySeed,
    OperatorAccount,
    StockConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _positive_int(data: dict[str, Any], key: str, default: int, upper: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= upper:
        raise ValueError(f"{key} must be an integer between 1 and {upper}, got {value!r}")
    return value


def parse_category_seed(data: Any) -> CategorySeed:
    if not isinstance(data, dict):
        raise ValueError(f"default_categories entries must be mappings, got {data!r}")
    try:
        return CategorySeed(name=str(data["name"]), prefix_code=str(data["prefix_code"]))
    except KeyError as exc:
        raise ValueError(f"default_categories entry missing {exc.args[0]!r}") from exc


def parse_operator(data: Any) -> OperatorAccount:
    if not isinstance(data, dict):
        raise ValueError(f"operators entries must be mappings, got {data!r}")
    try:
        return OperatorAccount(
            email=str(data["email"]).strip().lower(),
            password_hash=str(data["password_hash"]),
        )
    except KeyError as exc:
        raise ValueError(f"operators entry missing {exc.args[0]!r}") from exc


def parse_config(data: dict[str, Any], config_id: str) -> StockConfig:
    """
    Build a StockConfig from a parsed YAML mapping.

    ``config_id`` is used when the mapping has no ``config_id`` key.
    """
    database_url = data.get("database_url")
    if not isinstance(database_url, str) or not database_url.strip():
        raise ValueError("database_url is required")

    log_level = str(data.get("log_level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    include_sold_history = data.get("include_sold_history", True)
    if not isinstance(include_sold_history, bool):
        raise ValueError(
            f"include_sold_history must be true or false, got {include_sold_history!r}"
        )

    return StockConfig(
        config_id=str(data.get("config_id", config_id)),
        database_url=database_url.strip(),
        log_level=log_level,
        scan_min_length=_positive_int(data, "scan_min_length", DEFAULT_SCAN_MIN_LENGTH, 64),
        sequence_width=_positive_int(data, "sequence_width", DEFAULT_SEQUENCE_WIDTH, 9),
        include_sold_history=include_sold_history,
        default_categories=tuple(
            parse_category_seed(item) for item in data.get("default_categories") or ()
        ),
        operators=tuple(parse_operator(item) for item in data.get("operators") or ()),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> StockConfig:
    """Load and parse the configuration file at ``path``."""
    path = Path(path)
    return parse_config(load_yaml_file(path), config_id=path.stem)
