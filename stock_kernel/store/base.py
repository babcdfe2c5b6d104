"""
Module: stock_kernel.store.base
Responsibility: The record store contract -- create/read/update/delete over
    the three named collections.  Ledgers and the category registry talk to
    storage only through this interface, so the backing store (PostgreSQL,
    SQLite, in-process) is swappable and tests need no database.
Architecture position: Kernel > Store.  May import from exceptions only.

Invariants enforced:
    - Each call is atomic on its own: it either applies fully or raises.
    - insert() is the duplicate-key enforcement point (DuplicateRecordError).
    - update()/delete() are the missing-key enforcement point
      (RecordNotFoundError).  Two racing deletes of the same key: exactly
      one returns the record, the other raises.

Failure modes:
    - ValueError for an unknown field name in a filter, ordering or patch.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping

KEY_FIELD = "id"


class Collection(str, Enum):
    """Named collections exposed by every record store."""

    CATEGORIES = "categories"
    INVENTORY = "inventory"
    INVENTORY_OUT = "inventory_out"


COLLECTION_FIELDS: dict[Collection, frozenset[str]] = {
    Collection.CATEGORIES: frozenset({"id", "name", "prefix_code"}),
    Collection.INVENTORY: frozenset(
        {
            "id",
            "category",
            "brand_model",
            "grade",
            "purchase_price",
            "condition",
            "created_at",
        }
    ),
    Collection.INVENTORY_OUT: frozenset(
        {"id", "brand_model", "sale_price_basis", "exited_at"}
    ),
}

# Secondary unique fields per collection (primary key excluded)
UNIQUE_FIELDS: dict[Collection, tuple[str, ...]] = {
    Collection.CATEGORIES: ("name", "prefix_code"),
    Collection.INVENTORY: (),
    Collection.INVENTORY_OUT: (),
}


def check_fields(collection: Collection, names: Any) -> None:
    """Raise ValueError if any of ``names`` is not a field of ``collection``."""
    unknown = set(names) - COLLECTION_FIELDS[collection]
    if unknown:
        raise ValueError(
            f"Unknown field(s) for {collection.value}: {', '.join(sorted(unknown))}"
        )


class RecordStore(ABC):
    """
    Abstract record store.

    Contract:
        Records are plain dicts keyed by field name.  Every method opens and
        closes its own unit of work; there is no cross-call transaction.

    Non-goals:
        - No caching.  select() always reads current contents.
        - No multi-record atomicity.  Callers needing two writes to agree
          (checkout) handle partial failure themselves.
    """

    @abstractmethod
    def select(
        self,
        collection: Collection,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Records matching every equality in ``where``, optionally ordered."""

    @abstractmethod
    def insert(self, collection: Collection, record: Mapping[str, Any]) -> dict[str, Any]:
        """Insert ``record``.  Raises DuplicateRecordError on a taken key."""

    @abstractmethod
    def update(
        self,
        collection: Collection,
        key: Any,
        patch: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Apply ``patch`` and return the updated record.  Raises RecordNotFoundError."""

    @abstractmethod
    def delete(self, collection: Collection, key: Any) -> dict[str, Any]:
        """Delete and return the record.  Raises RecordNotFoundError."""

    def get(self, collection: Collection, key: Any) -> dict[str, Any] | None:
        rows = self.select(collection, where={KEY_FIELD: key})
        return rows[0] if rows else None
