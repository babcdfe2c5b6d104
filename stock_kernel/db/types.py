"""
Module: stock_kernel.db.types
Responsibility: Column sizing constants and price helpers.
    Centralizes price precision and rounding so that models, domain values
    and the console parse and store amounts identically.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    No floats for prices.  Every price column is Numeric(18, 2) (see db/base.py)
    and every price entering the kernel passes through money_from_value().

Failure modes:
    - ValueError on non-numeric input or float input to money_from_value().
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Identifier (SKU) column width
IDENTIFIER_LENGTH = 32

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a price to the stored precision.

    This is the only rounding function for prices; everything else
    delegates here.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def money_from_value(value: Decimal | int | str) -> Decimal:
    """
    Convert user or store input into a rounded Decimal price.

    Preconditions: value is a Decimal, int, or numeric string.
        Floats are rejected so that binary rounding never leaks into prices.
    Postconditions: Returns a finite Decimal rounded to MONEY_DECIMAL_PLACES.

    Raises:
        ValueError: If value is a float, bool, or not a finite number.
    """
    if isinstance(value, (bool, float)):
        raise ValueError(f"Price must not be a {type(value).__name__}: {value!r}")
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a number: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return round_money(amount)
