"""
IntakeService -- receiving new units into stock and revising them.

Responsibility:
    Builds a StockUnit from operator input: resolves the category, derives
    the next identifier from a fresh snapshot of identifiers in use,
    stamps ``created_at`` from the injected clock and inserts the unit.
    Revisions go through a validated StockUnitPatch.

Architecture position:
    Kernel > Services -- imperative shell.
    Calls CategoryRegistry, StockLedger, SoldLedger and the pure
    identifier generator.

Invariants enforced:
    DETERMINISTIC_IDENTIFIER -- the sequence is max + 1 over the Stock
    Ledger, plus the Sold Ledger when ``include_sold_history`` is on, so
    a sold identifier is never reissued while its record exists.
    SINGLE_LEDGER_MEMBERSHIP -- two operators receiving the same prefix at
    once compute the same identifier; the store's primary key rejects the
    second insert with DuplicateRecordError, which propagates.

Failure modes:
    - ValidationError: empty brand/model, bad grade or price, unknown or
      immutable field in revise().
    - CategoryNotFoundError: unknown category name.
    - SequenceExhaustedError: the prefix has used every sequence.
    - DuplicateRecordError: lost an identifier race (retry the intake).
    - RecordNotFoundError: revise() of a unit no longer in stock.
"""

from dataclasses import fields
from decimal import Decimal
from typing import Any

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.identifier import DEFAULT_SEQUENCE_WIDTH, next_identifier
from stock_kernel.domain.values import Grade, StockUnit, StockUnitPatch
from stock_kernel.exceptions import ValidationError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.base import BaseService
from stock_kernel.services.category_registry import CategoryRegistry
from stock_kernel.services.checkout_service import normalize_identifier
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import RecordStore

logger = get_logger("services.intake")

_MUTABLE_FIELDS = frozenset(f.name for f in fields(StockUnitPatch))


class IntakeService(BaseService):
    """
    Receives and revises stock units.

    Args:
        store: Shared record store.
        clock: Source of ``created_at``.  Defaults to SystemClock.
        sequence_width: Digits in the identifier sequence.
        include_sold_history: Also scan the Sold Ledger when allocating.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        sequence_width: int = DEFAULT_SEQUENCE_WIDTH,
        include_sold_history: bool = True,
    ):
        super().__init__(store)
        self.clock = clock if clock is not None else SystemClock()
        self.sequence_width = sequence_width
        self.include_sold_history = include_sold_history
        self.registry = CategoryRegistry(store)
        self.stock = StockLedger(store)
        self.sold = SoldLedger(store)

    def preview_identifier(self, category_name: str, brand_model: str) -> str:
        """The identifier receive() would allocate right now."""
        category = self.registry.get(category_name)
        return next_identifier(
            category, brand_model, self._identifiers_in_use(), self.sequence_width
        )

    def receive(
        self,
        category_name: str,
        brand_model: str,
        grade: Grade | str,
        purchase_price: Decimal | int | str,
        condition: str = "",
    ) -> StockUnit:
        """
        Put a new unit into stock.

        Postconditions:
            - The returned unit is in the Stock Ledger with a freshly
              allocated identifier and ``created_at`` = clock.now().
        """
        category = self.registry.get(category_name)
        unit_id = next_identifier(
            category, brand_model, self._identifiers_in_use(), self.sequence_width
        )
        unit = StockUnit(
            id=unit_id,
            category=category.name,
            brand_model=brand_model,
            grade=grade,
            purchase_price=purchase_price,
            condition=condition,
            created_at=self.clock.now(),
        )
        with LogContext.bind(unit_id=unit.id, operation="receive"):
            self.stock.insert(unit)
            logger.info(
                "unit_received",
                extra={
                    "category": unit.category,
                    "brand_model": unit.brand_model,
                    "grade": unit.grade.value,
                    "purchase_price": unit.purchase_price,
                },
            )
        return unit

    def revise(self, unit_id: str, **changes: Any) -> StockUnit:
        """
        Change descriptive fields of a unit in stock.

        Only brand_model, grade, purchase_price and condition may change.
        Passing ``id`` or ``category`` (or anything else) is rejected.
        """
        unknown = sorted(set(changes) - _MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(unknown[0], "cannot be changed")
        patch = StockUnitPatch(**changes)
        normalized = normalize_identifier(unit_id)
        with LogContext.bind(unit_id=normalized, operation="revise"):
            return self.stock.update(normalized, patch)

    def _identifiers_in_use(self) -> list[str]:
        in_use = self.stock.ids()
        if self.include_sold_history:
            in_use.extend(self.sold.ids())
        return in_use
