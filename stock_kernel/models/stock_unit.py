"""
Module: stock_kernel.models.stock_unit
Responsibility: ORM persistence for the Stock Ledger (the ``inventory``
    collection): one row per physical unit currently in stock.
Architecture position: Kernel > Models.  May import from db/base.py and
    db/types.py only.

Invariants enforced:
    SINGLE_LEDGER_MEMBERSHIP -- the identifier is the primary key, so a
    unit can appear at most once in stock.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base
from stock_kernel.db.types import IDENTIFIER_LENGTH


class StockUnitModel(Base):
    """Active (unsold) unit."""

    __tablename__ = "inventory"

    __table_args__ = (
        Index("idx_inventory_created_at", "created_at"),
        Index("idx_inventory_category", "category"),
    )

    id: Mapped[str] = mapped_column(String(IDENTIFIER_LENGTH), primary_key=True)

    # Category name at intake; immutable afterwards
    category: Mapped[str] = mapped_column(String(255), nullable=False)

    brand_model: Mapped[str] = mapped_column(String(255), nullable=False)

    grade: Mapped[str] = mapped_column(String(1), nullable=False)

    purchase_price: Mapped[Decimal] = mapped_column(nullable=False)

    condition: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<StockUnit {self.id}: {self.brand_model}>"
