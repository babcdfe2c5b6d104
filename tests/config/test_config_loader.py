"""Tests for YAML configuration loading (stock_config.loader)."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stock_config import load_config
from stock_config.loader import compute_checksum, load_yaml_file, parse_config
from stock_config.schema import CategorySeed, OperatorAccount, StockConfig

BUNDLED_DEFAULT = (
    Path(__file__).resolve().parents[2] / "stock_config" / "sets" / "default.yaml"
)


def _write(tmp_path: Path, data, name: str = "shop.yaml") -> Path:
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestBundledDefault:

    def test_loads(self):
        config = load_config(BUNDLED_DEFAULT)

        assert config.config_id == "default"
        assert config.scan_min_length == 7
        assert config.sequence_width == 4
        assert config.include_sold_history is True
        assert [seed.prefix_code for seed in config.default_categories] == ["H", "L", "T"]
        assert config.operators == ()
        assert len(config.checksum) == 64


class TestParseConfig:

    def test_minimal_mapping_uses_defaults(self):
        config = parse_config({"database_url": "memory://"}, config_id="minimal")

        assert config == StockConfig(
            config_id="minimal",
            database_url="memory://",
            checksum=compute_checksum({"database_url": "memory://"}),
        )

    def test_full_mapping(self):
        config = parse_config(
            {
                "config_id": "branch-2",
                "database_url": "postgresql://shop@db/stock",
                "log_level": "debug",
                "scan_min_length": 8,
                "sequence_width": 5,
                "include_sold_history": False,
                "default_categories": [{"name": "Kamera", "prefix_code": "K"}],
                "operators": [{"email": " Owner@Shop.ID ", "password_hash": "pbkdf2:sha256:1$s$ab"}],
            },
            config_id="ignored",
        )

        assert config.config_id == "branch-2"
        assert config.log_level == "DEBUG"
        assert config.scan_min_length == 8
        assert config.sequence_width == 5
        assert config.include_sold_history is False
        assert config.default_categories == (CategorySeed("Kamera", "K"),)
        assert config.operators == (OperatorAccount("owner@shop.id", "pbkdf2:sha256:1$s$ab"),)
        assert config.operator_hashes() == {"owner@shop.id": "pbkdf2:sha256:1$s$ab"}

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"database_url": "  "},
            {"database_url": "memory://", "log_level": "LOUD"},
            {"database_url": "memory://", "scan_min_length": 0},
            {"database_url": "memory://", "scan_min_length": True},
            {"database_url": "memory://", "sequence_width": 10},
            {"database_url": "memory://", "sequence_width": "4"},
            {"database_url": "memory://", "include_sold_history": "yes"},
            {"database_url": "memory://", "default_categories": [{"name": "Kamera"}]},
            {"database_url": "memory://", "default_categories": ["Kamera"]},
            {"database_url": "memory://", "operators": [{"email": "a@b.c"}]},
        ],
    )
    def test_invalid_values_rejected(self, data):
        with pytest.raises(ValueError):
            parse_config(data, config_id="bad")


class TestLoadConfig:

    def test_config_id_defaults_to_file_stem(self, tmp_path):
        path = _write(tmp_path, {"database_url": "memory://"}, name="kios.yaml")
        assert load_config(path).config_id == "kios"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_yaml_file(path)

    def test_malformed_yaml_propagates(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("database_url: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_config(path)


class TestChecksum:

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_content_change_detected(self):
        assert compute_checksum({"scan_min_length": 7}) != compute_checksum({"scan_min_length": 8})
