"""Record stores: the only path from the kernel to persistent state."""

from stock_kernel.store.base import (
    COLLECTION_FIELDS,
    KEY_FIELD,
    Collection,
    RecordStore,
)
from stock_kernel.store.memory_store import MemoryRecordStore

MEMORY_URL = "memory://"

__all__ = [
    "COLLECTION_FIELDS",
    "KEY_FIELD",
    "MEMORY_URL",
    "Collection",
    "MemoryRecordStore",
    "RecordStore",
    "open_store",
]


def open_store(database_url: str, create_schema: bool = True) -> RecordStore:
    """
    Build the record store for ``database_url``.

    ``memory://`` gives a fresh MemoryRecordStore.  Any other URL initializes
    the SQLAlchemy engine and, unless ``create_schema`` is False, creates the
    three tables if they are missing.
    """
    if database_url.startswith(MEMORY_URL):
        return MemoryRecordStore()

    from stock_kernel.db.engine import create_tables, init_engine_from_url
    from stock_kernel.store.sql_store import SqlRecordStore

    init_engine_from_url(database_url)
    if create_schema:
        create_tables()
    return SqlRecordStore()
