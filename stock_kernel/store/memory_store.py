"""
Module: stock_kernel.store.memory_store
Responsibility: In-process RecordStore.  Backs ``memory://`` URLs (demo
    console sessions) and the concurrency tests, where a real lock makes the
    racing-checkout guarantee deterministic.
Architecture position: Kernel > Store.

Invariants enforced:
    - Every call runs under one RLock, so each is atomic and racing deletes
      of the same key serialize: the loser sees RecordNotFoundError.
    - Primary key and UNIQUE_FIELDS are enforced like database constraints.
    - Callers receive copies; mutating a returned dict never touches the
      stored record.
"""

from threading import RLock
from typing import Any, Mapping

from stock_kernel.exceptions import DuplicateRecordError, RecordNotFoundError
from stock_kernel.logging_config import get_logger
from stock_kernel.store.base import (
    KEY_FIELD,
    UNIQUE_FIELDS,
    Collection,
    RecordStore,
    check_fields,
)

logger = get_logger("store.memory")


class MemoryRecordStore(RecordStore):
    """Dict-of-dicts store guarded by a re-entrant lock."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._rows: dict[Collection, dict[Any, dict[str, Any]]] = {
            collection: {} for collection in Collection
        }

    def select(
        self,
        collection: Collection,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        where = dict(where or {})
        check_fields(collection, where)
        if order_by is not None:
            check_fields(collection, [order_by])
        with self._lock:
            rows = [
                dict(row)
                for row in self._rows[collection].values()
                if all(row.get(k) == v for k, v in where.items())
            ]
        if order_by is not None:
            rows.sort(key=lambda row: row[order_by], reverse=descending)
        return rows

    def insert(self, collection: Collection, record: Mapping[str, Any]) -> dict[str, Any]:
        check_fields(collection, record)
        if record.get(KEY_FIELD) is None:
            raise ValueError(f"Record for {collection.value} has no {KEY_FIELD}")
        key = record[KEY_FIELD]
        with self._lock:
            table = self._rows[collection]
            if key in table:
                raise DuplicateRecordError(collection.value, str(key))
            for unique in UNIQUE_FIELDS[collection]:
                if any(row.get(unique) == record.get(unique) for row in table.values()):
                    raise DuplicateRecordError(collection.value, str(record.get(unique)))
            table[key] = dict(record)
        logger.debug(
            "record_inserted",
            extra={"collection": collection.value, "key": str(key)},
        )
        return dict(record)

    def update(
        self,
        collection: Collection,
        key: Any,
        patch: Mapping[str, Any],
    ) -> dict[str, Any]:
        check_fields(collection, patch)
        if KEY_FIELD in patch:
            raise ValueError(f"{KEY_FIELD} is immutable")
        with self._lock:
            row = self._rows[collection].get(key)
            if row is None:
                raise RecordNotFoundError(collection.value, str(key))
            row.update(patch)
            updated = dict(row)
        logger.debug(
            "record_updated",
            extra={"collection": collection.value, "key": str(key), "fields": sorted(patch)},
        )
        return updated

    def delete(self, collection: Collection, key: Any) -> dict[str, Any]:
        with self._lock:
            row = self._rows[collection].pop(key, None)
        if row is None:
            raise RecordNotFoundError(collection.value, str(key))
        logger.debug(
            "record_deleted",
            extra={"collection": collection.value, "key": str(key)},
        )
        return row
