"""Services for the stock kernel (write side)."""

from stock_kernel.services.auth_gateway import (
    AuthGateway,
    LocalAuthGateway,
    OperatorSession,
    hash_password,
    verify_password,
)
from stock_kernel.services.category_registry import CategoryRegistry
from stock_kernel.services.checkout_service import (
    CheckoutMode,
    CheckoutService,
    ScanTrigger,
    normalize_identifier,
)
from stock_kernel.services.intake_service import IntakeService
from stock_kernel.services.maintenance_service import MaintenanceService, ResetResult
from stock_kernel.services.sold_ledger import SoldLedger
from stock_kernel.services.stock_ledger import StockLedger

__all__ = [
    "AuthGateway",
    "CategoryRegistry",
    "CheckoutMode",
    "CheckoutService",
    "IntakeService",
    "LocalAuthGateway",
    "MaintenanceService",
    "OperatorSession",
    "ResetResult",
    "ScanTrigger",
    "SoldLedger",
    "StockLedger",
    "hash_password",
    "normalize_identifier",
    "verify_password",
]
