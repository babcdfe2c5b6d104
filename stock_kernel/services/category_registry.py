"""
CategoryRegistry -- the set of product categories and their prefixes.

Responsibility:
    Lists and registers categories.  A category's prefix code is the
    leading part of every identifier issued under it, so both the name and
    the prefix must be unique across the registry.

Architecture position:
    Kernel > Services -- imperative shell.
    Read by IntakeService (prefix resolution) and SummarySelector
    (per-category counts); written by the operator console.

Invariants enforced:
    - Categories are never mutated or deleted once registered.
    - Name and prefix_code uniqueness are checked here for a friendly
      ValidationError and enforced again by the store (unique constraints),
      which covers two operators registering at the same time.

Failure modes:
    - ValidationError: empty name/prefix, malformed prefix, name or prefix
      already registered.
    - CategoryNotFoundError from get().
"""

from __future__ import annotations

from typing import Iterable

from stock_kernel.domain.values import Category
from stock_kernel.exceptions import (
    CategoryNotFoundError,
    DuplicateRecordError,
    ValidationError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.services.base import BaseService
from stock_kernel.store.base import Collection

logger = get_logger("services.category_registry")


class CategoryRegistry(BaseService):
    """
    Registry of categories.

    Guarantees:
        - list() is ordered by name ascending.
        - add() returns the stored Category with trimmed name and
          uppercased prefix.
    """

    def list(self) -> list[Category]:
        rows = self.store.select(Collection.CATEGORIES, order_by="name")
        return [Category.from_record(row) for row in rows]

    def get(self, name: str) -> Category:
        """
        Look up a category by exact (trimmed) name.

        Raises:
            CategoryNotFoundError: No category with that name.
        """
        wanted = name.strip() if isinstance(name, str) else name
        rows = self.store.select(Collection.CATEGORIES, where={"name": wanted})
        if not rows:
            raise CategoryNotFoundError(str(name))
        return Category.from_record(rows[0])

    def add(self, name: str, prefix_code: str) -> Category:
        """
        Register a new category.

        Preconditions:
            - ``name`` non-empty after trimming.
            - ``prefix_code`` is 1-2 letters (case-insensitive).

        Raises:
            ValidationError: Invalid input, or the name/prefix is taken.
        """
        category = Category(name=name, prefix_code=prefix_code)

        for existing in self.list():
            if existing.prefix_code == category.prefix_code:
                raise ValidationError(
                    "prefix_code",
                    f"{category.prefix_code} already used by {existing.name}",
                )
            if existing.name == category.name:
                raise ValidationError("name", f"{category.name} already registered")

        try:
            self.store.insert(Collection.CATEGORIES, category.to_record())
        except DuplicateRecordError as exc:
            raise ValidationError(
                "name", f"{category.name}/{category.prefix_code} already registered"
            ) from exc

        logger.info(
            "category_added",
            extra={"category": category.name, "prefix_code": category.prefix_code},
        )
        return category

    def ensure_seeded(self, seeds: Iterable[tuple[str, str]]) -> list[Category]:
        """
        Register each (name, prefix_code) seed that is not present yet.

        A seed whose name already exists is skipped even if its prefix
        differs.  Returns the categories that were added.
        """
        known = {category.name for category in self.list()}
        added = []
        for name, prefix_code in seeds:
            if name.strip() in known:
                continue
            added.append(self.add(name, prefix_code))
            known.add(name.strip())
        return added
