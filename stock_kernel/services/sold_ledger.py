"""
SoldLedger -- units that have left stock.

Responsibility:
    Typed access to the ``inventory_out`` collection.  Records are created
    only by CheckoutService; remove() exists to correct history and never
    puts the unit back in stock.

Architecture position:
    Kernel > Services -- imperative shell.

Failure modes:
    - DuplicateRecordError on append of an id already in the ledger.
    - RecordNotFoundError on remove of a missing id.
"""

from stock_kernel.domain.values import SoldRecord
from stock_kernel.logging_config import get_logger
from stock_kernel.services.base import BaseService
from stock_kernel.store.base import Collection

logger = get_logger("services.sold_ledger")


class SoldLedger(BaseService):
    """The Sold Ledger.  Append-mostly."""

    collection = Collection.INVENTORY_OUT

    def append(self, record: SoldRecord) -> SoldRecord:
        self.store.insert(self.collection, record.to_record())
        return record

    def remove(self, record_id: str) -> SoldRecord:
        record = SoldRecord.from_record(self.store.delete(self.collection, record_id))
        logger.info("sold_record_removed", extra={"unit_id": record.id})
        return record

    def all(self) -> list[SoldRecord]:
        """Every record, newest ``exited_at`` first."""
        rows = self.store.select(self.collection, order_by="exited_at", descending=True)
        return [SoldRecord.from_record(row) for row in rows]

    def find_by_id(self, record_id: str) -> SoldRecord | None:
        row = self.store.get(self.collection, record_id)
        return SoldRecord.from_record(row) if row is not None else None

    def ids(self) -> list[str]:
        return [row["id"] for row in self.store.select(self.collection)]
