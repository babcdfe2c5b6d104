"""
Module: stock_kernel.db.base
Responsibility: Declarative base shared by the three ORM models, plus the
    column type mapping that keeps prices, timestamps and category ids
    stored the same way on PostgreSQL and SQLite.
Architecture position: Kernel > DB.  Lowest import target inside the
    kernel's persistence code; imports nothing from the kernel.

Invariants enforced:
    - Decimal columns are Numeric(18, 2).  Prices never touch float.
    - datetime columns are timezone-aware.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import DateTime, Numeric, String, inspect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """Category ids as 36-character text, so SQLite and PostgreSQL agree."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """
    Base for CategoryModel, StockUnitModel and SoldRecordModel.

    Each model declares its own primary key; the ledgers are keyed by the
    unit identifier itself, categories by a UUID.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(18, 2),
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
    }

    def to_record(self) -> dict[str, Any]:
        """The row as the plain dict RecordStore callers receive."""
        mapper = inspect(type(self))
        return {column.key: getattr(self, column.key) for column in mapper.column_attrs}
