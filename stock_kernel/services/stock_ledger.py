"""
StockLedger -- units currently in stock.

Responsibility:
    Typed access to the ``inventory`` collection: insert, revise, remove
    and read StockUnits.  Rows are validated on the way out, so a corrupt
    row surfaces as ValidationError instead of a bad total.

Architecture position:
    Kernel > Services -- imperative shell.
    Used by IntakeService, CheckoutService, MaintenanceService and the
    selectors.

Invariants enforced:
    SINGLE_LEDGER_MEMBERSHIP (partial) -- insert() refuses a duplicate id.
    Cross-ledger uniqueness is the caller's job (IntakeService scans both
    ledgers; CheckoutService removes before it appends).

Failure modes:
    - DuplicateRecordError on insert of an existing id.
    - RecordNotFoundError on update/remove of a missing id.
"""

from stock_kernel.domain.values import StockUnit, StockUnitPatch
from stock_kernel.logging_config import get_logger
from stock_kernel.services.base import BaseService
from stock_kernel.store.base import Collection

logger = get_logger("services.stock_ledger")


class StockLedger(BaseService):
    """The Stock Ledger.  One record per unit in stock."""

    collection = Collection.INVENTORY

    def insert(self, unit: StockUnit) -> StockUnit:
        self.store.insert(self.collection, unit.to_record())
        return unit

    def update(self, unit_id: str, patch: StockUnitPatch) -> StockUnit:
        """Apply ``patch`` to the unit; last writer wins."""
        row = self.store.update(self.collection, unit_id, patch.to_record())
        logger.info(
            "unit_revised",
            extra={"unit_id": unit_id, "fields": sorted(patch.changes())},
        )
        return StockUnit.from_record(row)

    def remove(self, unit_id: str) -> StockUnit:
        """Delete the unit and return it as it was stored."""
        return StockUnit.from_record(self.store.delete(self.collection, unit_id))

    def all(self) -> list[StockUnit]:
        """Every unit, newest ``created_at`` first."""
        rows = self.store.select(self.collection, order_by="created_at", descending=True)
        return [StockUnit.from_record(row) for row in rows]

    def find_by_id(self, unit_id: str) -> StockUnit | None:
        row = self.store.get(self.collection, unit_id)
        return StockUnit.from_record(row) if row is not None else None

    def ids(self) -> list[str]:
        return [row["id"] for row in self.store.select(self.collection)]
