"""
Module: stock_kernel.models.sold_record
Responsibility: ORM persistence for the Sold Ledger (the ``inventory_out``
    collection): one row per unit that has left stock.
Architecture position: Kernel > Models.  May import from db/base.py and
    db/types.py only.

Invariants enforced:
    SINGLE_LEDGER_MEMBERSHIP -- the identifier is the primary key, so a
    unit can be sold at most once.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base
from stock_kernel.db.types import IDENTIFIER_LENGTH


class SoldRecordModel(Base):
    """Checked-out unit."""

    __tablename__ = "inventory_out"

    __table_args__ = (Index("idx_inventory_out_exited_at", "exited_at"),)

    id: Mapped[str] = mapped_column(String(IDENTIFIER_LENGTH), primary_key=True)

    brand_model: Mapped[str] = mapped_column(String(255), nullable=False)

    # Purchase price copied at exit time
    sale_price_basis: Mapped[Decimal] = mapped_column(nullable=False)

    exited_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<SoldRecord {self.id}: {self.brand_model}>"
