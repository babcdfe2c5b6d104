"""
MaintenanceService -- operator-initiated wipe of both ledgers.

Responsibility:
    Deletes every stock unit and every sold record after re-checking the
    signed-in operator's password and getting an explicit confirmation.
    Categories are kept.

Architecture position:
    Kernel > Services -- imperative shell.

Failure modes:
    - NotAuthenticatedError: nobody is signed in.
    - AuthenticationError: the password does not match the operator.
"""

from dataclasses import dataclass
from typing import Callable

from stock_kernel.exceptions import RecordNotFoundError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.auth_gateway import AuthGateway
from stock_kernel.services.base import BaseService
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import RecordStore

logger = get_logger("services.maintenance")


@dataclass(frozen=True)
class ResetResult:
    stock_removed: int
    sold_removed: int


class MaintenanceService(BaseService):
    def __init__(self, store: RecordStore, auth: AuthGateway):
        super().__init__(store)
        self.auth = auth
        self.stock = StockLedger(store)
        self.sold = SoldLedger(store)

    def reset_ledgers(
        self,
        password: str,
        confirm: Callable[[], bool],
    ) -> ResetResult | None:
        """
        Empty both ledgers.

        Returns None when ``confirm`` declines; nothing is deleted then.
        """
        session = self.auth.reauthenticate("reset_ledgers", password)
        with LogContext.bind(actor_id=session.email, operation="reset_ledgers"):
            if not confirm():
                logger.info("reset_declined")
                return None

            result = ResetResult(
                stock_removed=self._drain(self.stock.collection, self.stock.ids()),
                sold_removed=self._drain(self.sold.collection, self.sold.ids()),
            )
            logger.warning(
                "ledgers_reset",
                extra={
                    "stock_removed": result.stock_removed,
                    "sold_removed": result.sold_removed,
                },
            )
            return result

    def _drain(self, collection, ids: list[str]) -> int:
        removed = 0
        for record_id in ids:
            try:
                self.store.delete(collection, record_id)
            except RecordNotFoundError:
                # Checked out or deleted concurrently
                continue
            removed += 1
        return removed
