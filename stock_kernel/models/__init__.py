"""ORM models, one per store collection."""

from stock_kernel.models.category import CategoryModel
from stock_kernel.models.sold_record import SoldRecordModel
from stock_kernel.models.stock_unit import StockUnitModel

__all__ = [
    "CategoryModel",
    "SoldRecordModel",
    "StockUnitModel",
]
