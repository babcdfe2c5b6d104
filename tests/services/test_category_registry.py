"""
CategoryRegistry: listing, registration rules, seeding.
"""

import pytest

from stock_kernel.exceptions import CategoryNotFoundError, ValidationError
from stock_kernel.services.category_registry import CategoryRegistry


@pytest.fixture
def registry(store):
    return CategoryRegistry(store)


class TestAdd:
    def test_add_normalizes(self, registry):
        category = registry.add("  Handphone ", "h")
        assert category.name == "Handphone"
        assert category.prefix_code == "H"
        assert registry.get("Handphone") == category

    def test_list_ordered_by_name(self, registry):
        registry.add("Tablet", "T")
        registry.add("Handphone", "H")
        registry.add("Laptop", "L")
        assert [c.name for c in registry.list()] == ["Handphone", "Laptop", "Tablet"]

    def test_prefix_collision_rejected(self, registry):
        registry.add("Handphone", "H")
        with pytest.raises(ValidationError) as exc_info:
            registry.add("Headset", "h")
        assert exc_info.value.field == "prefix_code"
        assert [c.name for c in registry.list()] == ["Handphone"]

    def test_name_collision_rejected(self, registry):
        registry.add("Handphone", "H")
        with pytest.raises(ValidationError) as exc_info:
            registry.add("Handphone", "HP")
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("name, prefix_code", [("", "H"), ("Drone", ""), ("Drone", "DRN")])
    def test_invalid_input_rejected(self, registry, name, prefix_code):
        with pytest.raises(ValidationError):
            registry.add(name, prefix_code)
        assert registry.list() == []

    def test_logs_category_added(self, registry, captured_logs):
        registry.add("Tablet", "T")
        events = [r for r in captured_logs() if r["message"] == "category_added"]
        assert events and events[0]["prefix_code"] == "T"


class TestGetAndSeed:
    def test_get_unknown_raises(self, registry):
        with pytest.raises(CategoryNotFoundError) as exc_info:
            registry.get("Drone")
        assert exc_info.value.name == "Drone"

    def test_ensure_seeded_is_idempotent(self, registry):
        seeds = [("Handphone", "H"), ("Laptop", "L")]
        assert len(registry.ensure_seeded(seeds)) == 2
        assert registry.ensure_seeded(seeds) == []
        assert len(registry.list()) == 2

    def test_ensure_seeded_skips_existing_name(self, registry):
        registry.add("Handphone", "HP")
        added = registry.ensure_seeded([("Handphone", "H"), ("Tablet", "T")])
        assert [c.name for c in added] == ["Tablet"]
        assert registry.get("Handphone").prefix_code == "HP"
