"""
InventoryApp -- one wired set of kernel services over a single store.

Responsibility:
    Holds the store, clock and every service/selector built on them, so
    that callers (the console, tests) construct the kernel in one place.
    Configuration parsing lives outside the kernel; stock_config.bootstrap()
    turns a StockConfig into the keyword arguments of create_app().
"""

from dataclasses import dataclass
from typing import Mapping

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.identifier import DEFAULT_SEQUENCE_WIDTH
from stock_kernel.selectors.integrity_selector import IntegritySelector
from stock_kernel.selectors.summary_selector import SummarySelector
from stock_kernel.services.auth_gateway import AuthGateway, LocalAuthGateway
from stock_kernel.services.category_registry import CategoryRegistry
from stock_kernel.services.checkout_service import (
    DEFAULT_SCAN_MIN_LENGTH,
    CheckoutService,
    ConfirmCheckout,
    ScanTrigger,
)
from stock_kernel.services.intake_service import IntakeService
from stock_kernel.services.maintenance_service import MaintenanceService
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger
from stock_kernel.store.base import RecordStore


@dataclass
class InventoryApp:
    store: RecordStore
    clock: Clock
    auth: AuthGateway
    registry: CategoryRegistry
    stock: StockLedger
    sold: SoldLedger
    intake: IntakeService
    checkout: CheckoutService
    scan: ScanTrigger
    maintenance: MaintenanceService
    summary: SummarySelector
    integrity: IntegritySelector


def _always_confirm(unit) -> bool:
    return True


def create_app(
    store: RecordStore,
    *,
    confirm: ConfirmCheckout | None = None,
    clock: Clock | None = None,
    auth: AuthGateway | None = None,
    operators: Mapping[str, str] | None = None,
    sequence_width: int = DEFAULT_SEQUENCE_WIDTH,
    include_sold_history: bool = True,
    scan_min_length: int = DEFAULT_SCAN_MIN_LENGTH,
) -> InventoryApp:
    """
    Build an InventoryApp.

    ``confirm`` defaults to approving every checkout, which suits scripted
    use; interactive callers pass a prompt.  ``auth`` defaults to a
    LocalAuthGateway over ``operators`` (email -> password hash).
    """
    clock = clock if clock is not None else SystemClock()
    if auth is None:
        auth = LocalAuthGateway(operators or {}, clock=clock)
    if confirm is None:
        confirm = _always_confirm
    checkout = CheckoutService(store, confirm, clock=clock)
    return InventoryApp(
        store=store,
        clock=clock,
        auth=auth,
        registry=CategoryRegistry(store),
        stock=StockLedger(store),
        sold=SoldLedger(store),
        intake=IntakeService(
            store,
            clock=clock,
            sequence_width=sequence_width,
            include_sold_history=include_sold_history,
        ),
        checkout=checkout,
        scan=ScanTrigger(checkout, min_length=scan_min_length),
        maintenance=MaintenanceService(store, auth),
        summary=SummarySelector(store),
        integrity=IntegritySelector(store, sequence_width=sequence_width),
    )
