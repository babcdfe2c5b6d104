"""
CheckoutService -- moving a unit from the Stock Ledger to the Sold Ledger.

Responsibility:
    The only writer of SoldRecords.  A checkout resolves the unit, asks
    the injected confirmation callback, appends a SoldRecord stamped by
    the injected clock and then removes the unit from stock.  ScanTrigger
    drives the same transition from a barcode/keyboard scan buffer.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    SINGLE_LEDGER_MEMBERSHIP -- the SoldRecord is appended before the unit
    leaves stock, so the identifier is held by at least one ledger for the
    whole transition and a concurrent intake cannot reissue it.  The Sold
    Ledger's primary key is the enforcement point: of two racing checkouts
    of one id exactly one appends, the other gets RecordNotFoundError and
    writes nothing.
    SOLD_HAS_STOCK_ORIGIN -- the SoldRecord is built from the resolved
    stock unit, never from caller input.

Failure modes:
    - ValidationError: empty identifier.
    - RecordNotFoundError: unknown id, or lost a checkout race.
    - DuplicateRecordError: a SoldRecord from an earlier unit with the same
      identifier is still in the Sold Ledger.  Nothing is written.
    - Any removal failure after a successful append: the SoldRecord is
      withdrawn and the original error is re-raised.
    - InconsistentLedgerError: the removal failed AND the SoldRecord could
      not be withdrawn.  The unit snapshot travels on the exception.
"""

from enum import Enum
from typing import Callable

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.values import SoldRecord, StockUnit
from stock_kernel.exceptions import (
    DuplicateRecordError,
    InconsistentLedgerError,
    NotFoundError,
    RecordNotFoundError,
    ValidationError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.base import BaseService
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import Collection, RecordStore

logger = get_logger("services.checkout")

DEFAULT_SCAN_MIN_LENGTH = 7

ConfirmCheckout = Callable[[StockUnit], bool]


class CheckoutMode(str, Enum):
    """How the checkout was triggered."""

    MANUAL = "manual"
    SCAN = "scan"


def normalize_identifier(raw: str) -> str:
    """Trim surrounding whitespace and uppercase."""
    if not isinstance(raw, str):
        raise ValidationError("id", "must be text")
    return raw.strip().upper()


class CheckoutService(BaseService):
    """
    Stock -> Sold transition.

    Args:
        store: Shared record store.
        confirm: Called with the resolved unit; False cancels the checkout.
        clock: Source of ``exited_at``.  Defaults to SystemClock.
    """

    def __init__(
        self,
        store: RecordStore,
        confirm: ConfirmCheckout,
        clock: Clock | None = None,
    ):
        super().__init__(store)
        self.confirm = confirm
        self.clock = clock if clock is not None else SystemClock()
        self.stock = StockLedger(store)
        self.sold = SoldLedger(store)

    def checkout(
        self,
        raw_id: str,
        mode: CheckoutMode = CheckoutMode.MANUAL,
    ) -> SoldRecord | None:
        """
        Check a unit out of stock.

        Returns:
            The appended SoldRecord, or None when the operator declined.
        """
        unit_id = normalize_identifier(raw_id)
        if not unit_id:
            raise ValidationError("id", "must be a non-empty string")

        with LogContext.bind(unit_id=unit_id, operation=f"checkout_{mode.value}"):
            unit = self.stock.find_by_id(unit_id)
            if unit is None:
                raise RecordNotFoundError(Collection.INVENTORY.value, unit_id)

            if not self.confirm(unit):
                logger.info("checkout_declined", extra={"mode": mode.value})
                return None

            record = SoldRecord.from_unit(unit, self.clock.now())
            self._append(unit, record)
            try:
                self.stock.remove(unit_id)
            except Exception:
                self._withdraw(unit, record)
                raise

            logger.info(
                "checkout_completed",
                extra={
                    "mode": mode.value,
                    "sale_price_basis": record.sale_price_basis,
                    "exited_at": record.exited_at,
                },
            )
            return record

    def _append(self, unit: StockUnit, record: SoldRecord) -> None:
        """
        Append ``record``, turning a lost race into RecordNotFoundError.

        A duplicate whose exit is not older than the unit's intake was
        written by a concurrent checkout of this same unit.  An older one
        belongs to an earlier unit that carried the same identifier, and
        the DuplicateRecordError propagates.
        """
        try:
            self.sold.append(record)
        except DuplicateRecordError as exc:
            existing = self.sold.find_by_id(unit.id)
            if existing is not None and existing.exited_at < unit.created_at:
                raise
            logger.info("checkout_lost_race")
            raise RecordNotFoundError(Collection.INVENTORY.value, unit.id) from exc

    def _withdraw(self, unit: StockUnit, record: SoldRecord) -> None:
        """Delete the just-appended record after the stock removal failed."""
        try:
            self.sold.remove(record.id)
        except Exception as exc:
            logger.critical(
                "checkout_inconsistent",
                exc_info=True,
                extra={"stage": "withdraw"},
            )
            raise InconsistentLedgerError(unit.id, "withdraw", unit) from exc
        logger.warning("checkout_rolled_back", extra={"stage": "remove"})


class ScanTrigger:
    """
    Scan-mode buffer.

    The buffer holds what the scanner (or keyboard) has produced so far.
    When it is at least ``min_length`` long and names an active unit
    exactly, a SCAN checkout fires.  The buffer is cleared after every
    fire, whether the checkout was confirmed, declined or lost to another
    operator.  A buffer that matches nothing is kept.
    """

    def __init__(
        self,
        checkout_service: CheckoutService,
        min_length: int = DEFAULT_SCAN_MIN_LENGTH,
    ):
        if min_length < 1:
            raise ValueError(f"min_length must be positive: {min_length}")
        self.checkout_service = checkout_service
        self.min_length = min_length
        self._buffer = ""

    @property
    def buffer(self) -> str:
        return self._buffer

    def feed(self, text: str) -> SoldRecord | None:
        """Replace the buffer with ``text`` and evaluate it."""
        self._buffer = normalize_identifier(text)
        return self._evaluate()

    def push(self, chars: str) -> SoldRecord | None:
        """Append ``chars`` to the buffer and evaluate it."""
        self._buffer = normalize_identifier(self._buffer + chars)
        return self._evaluate()

    def reset(self) -> None:
        self._buffer = ""

    def _evaluate(self) -> SoldRecord | None:
        candidate = self._buffer
        if len(candidate) < self.min_length:
            return None
        if self.checkout_service.stock.find_by_id(candidate) is None:
            logger.debug("scan_no_match", extra={"length": len(candidate)})
            return None

        try:
            return self.checkout_service.checkout(candidate, mode=CheckoutMode.SCAN)
        except NotFoundError:
            logger.info("scan_target_gone", extra={"unit_id": candidate})
            return None
        finally:
            self.reset()
