"""
Module: stock_kernel.models.category
Responsibility: ORM persistence for product categories and their identifier
    prefix codes (the ``categories`` collection).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - name and prefix_code are each unique (uq_category_name,
      uq_category_prefix_code).  A duplicate insert surfaces as
      IntegrityError, which the SQL store translates to DuplicateRecordError.
"""

from uuid import UUID, uuid4

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base


class CategoryModel(Base):
    """Category row.  Created once, never updated or deleted."""

    __tablename__ = "categories"

    __table_args__ = (
        UniqueConstraint("name", name="uq_category_name"),
        UniqueConstraint("prefix_code", name="uq_category_prefix_code"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # 1-2 uppercase letters, first part of every identifier in the category
    prefix_code: Mapped[str] = mapped_column(String(2), nullable=False)

    def __repr__(self) -> str:
        return f"<Category {self.prefix_code}: {self.name}>"
