"""
Module: stock_kernel.store.sql_store
Responsibility: RecordStore backed by SQLAlchemy ORM models.  PostgreSQL in
    production, SQLite locally and in tests.
Architecture position: Kernel > Store.  May import from db/ and models/.

Invariants enforced:
    - One session_scope() per call: commit on success, rollback on error.
    - update()/delete() read the row FOR UPDATE before writing, so under
      PostgreSQL two racing deletes serialize on the row lock and the
      second finds nothing (RecordNotFoundError).
    - IntegrityError on insert is translated to DuplicateRecordError; it
      is never swallowed.
"""

from typing import Any, Mapping

from sqlalchemy import delete as sa_delete
from sqlalchemy import select as sa_select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from stock_kernel.db.base import Base
from stock_kernel.db.engine import session_scope
from stock_kernel.exceptions import DuplicateRecordError, RecordNotFoundError
from stock_kernel.logging_config import get_logger
from stock_kernel.models import CategoryModel, SoldRecordModel, StockUnitModel
from stock_kernel.store.base import KEY_FIELD, Collection, RecordStore, check_fields

logger = get_logger("store.sql")

_MODELS: dict[Collection, type[Base]] = {
    Collection.CATEGORIES: CategoryModel,
    Collection.INVENTORY: StockUnitModel,
    Collection.INVENTORY_OUT: SoldRecordModel,
}


class SqlRecordStore(RecordStore):
    """
    SQLAlchemy-backed record store.

    Args:
        session_factory: Factory for new sessions.  Defaults to the factory
            configured by db.engine.init_engine_from_url().
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def select(
        self,
        collection: Collection,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        model = _MODELS[collection]
        where = dict(where or {})
        check_fields(collection, where)
        stmt = sa_select(model)
        for name, value in where.items():
            stmt = stmt.where(getattr(model, name) == value)
        if order_by is not None:
            check_fields(collection, [order_by])
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        with session_scope(self._session_factory) as session:
            return [row.to_record() for row in session.scalars(stmt)]

    def insert(self, collection: Collection, record: Mapping[str, Any]) -> dict[str, Any]:
        model = _MODELS[collection]
        check_fields(collection, record)
        key = record.get(KEY_FIELD)
        with session_scope(self._session_factory) as session:
            obj = model(**record)
            session.add(obj)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateRecordError(collection.value, str(key)) from exc
            inserted = obj.to_record()
        logger.debug(
            "record_inserted",
            extra={"collection": collection.value, "key": str(key)},
        )
        return inserted

    def update(
        self,
        collection: Collection,
        key: Any,
        patch: Mapping[str, Any],
    ) -> dict[str, Any]:
        model = _MODELS[collection]
        check_fields(collection, patch)
        if KEY_FIELD in patch:
            raise ValueError(f"{KEY_FIELD} is immutable")
        with session_scope(self._session_factory) as session:
            obj = session.get(model, key, with_for_update=True)
            if obj is None:
                raise RecordNotFoundError(collection.value, str(key))
            for name, value in patch.items():
                setattr(obj, name, value)
            session.flush()
            updated = obj.to_record()
        logger.debug(
            "record_updated",
            extra={"collection": collection.value, "key": str(key), "fields": sorted(patch)},
        )
        return updated

    def delete(self, collection: Collection, key: Any) -> dict[str, Any]:
        model = _MODELS[collection]
        with session_scope(self._session_factory) as session:
            obj = session.get(model, key, with_for_update=True)
            if obj is None:
                raise RecordNotFoundError(collection.value, str(key))
            record = obj.to_record()
            result = session.execute(
                sa_delete(model)
                .where(getattr(model, KEY_FIELD) == key)
                .execution_options(synchronize_session=False)
            )
            # Another writer removed it between the read and the delete
            if result.rowcount != 1:
                raise RecordNotFoundError(collection.value, str(key))
        logger.debug(
            "record_deleted",
            extra={"collection": collection.value, "key": str(key)},
        )
        return record
