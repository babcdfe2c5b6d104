"""
Identifier -- category-scoped sequential SKU generation.

Responsibility:
    Derives the next identifier for a (category, brand/model) pair from the
    identifiers already in use.  An identifier is::

        prefix_code + brand_prefix + zero-padded sequence

    e.g. category "Handphone" (H) + "Samsung S24" -> ``HSA0001``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Callers pass the
    snapshot of identifiers to scan; IntakeService decides which ledgers
    contribute to it.

Invariants enforced:
    DETERMINISTIC_IDENTIFIER -- the sequence is one past the highest
    sequence in use for the combined prefix.  Only identifiers that are
    exactly ``combined_prefix`` followed by ``width`` digits count, so
    "HAB0001" never borrows from "HABC0001".

Failure modes:
    - ValidationError when brand_model is empty or whitespace.
    - SequenceExhaustedError when the next sequence needs more than
      ``width`` digits.  Truncating would collide with an existing id.
"""

from __future__ import annotations

from typing import Iterable

from stock_kernel.domain.values import Category
from stock_kernel.exceptions import SequenceExhaustedError, ValidationError

BRAND_PREFIX_LENGTH = 2
DEFAULT_SEQUENCE_WIDTH = 4


def brand_prefix(brand_model: str) -> str:
    """
    First two characters of the brand/model, uppercased.

    Shorter inputs are right-padded with spaces so every combined prefix
    has the same length for a given category.
    """
    if not isinstance(brand_model, str) or not brand_model.strip():
        raise ValidationError("brand_model", "must be a non-empty string")
    head = brand_model.strip()[:BRAND_PREFIX_LENGTH].upper()
    return head.ljust(BRAND_PREFIX_LENGTH)


def combined_prefix(category: Category, brand_model: str) -> str:
    return f"{category.prefix_code}{brand_prefix(brand_model)}"


def parse_sequence(
    identifier: str,
    prefix: str,
    width: int = DEFAULT_SEQUENCE_WIDTH,
) -> int | None:
    """
    Sequence number encoded in ``identifier`` under ``prefix``.

    Returns None when the identifier does not belong to the prefix or its
    suffix is not exactly ``width`` decimal digits.
    """
    if not identifier.startswith(prefix):
        return None
    suffix = identifier[len(prefix):]
    if len(suffix) != width or not suffix.isascii() or not suffix.isdigit():
        return None
    return int(suffix)


def format_identifier(prefix: str, sequence: int, width: int = DEFAULT_SEQUENCE_WIDTH) -> str:
    if sequence < 1:
        raise ValueError(f"Sequence must be positive: {sequence}")
    if sequence >= 10 ** width:
        raise SequenceExhaustedError(prefix, width)
    return f"{prefix}{sequence:0{width}d}"


def next_identifier(
    category: Category,
    brand_model: str,
    existing_ids: Iterable[str],
    width: int = DEFAULT_SEQUENCE_WIDTH,
) -> str:
    """
    Next free identifier for ``category`` and ``brand_model``.

    Preconditions:
        - ``existing_ids`` holds every identifier that must not be reused
          (at least the current Stock Ledger).
    Postconditions:
        - The result is not in ``existing_ids`` and its sequence is one
          greater than the largest sequence found for the same prefix.

    Raises:
        ValidationError: brand_model empty.
        SequenceExhaustedError: sequence would exceed ``width`` digits.
    """
    prefix = combined_prefix(category, brand_model)
    highest = 0
    for identifier in existing_ids:
        sequence = parse_sequence(identifier, prefix, width)
        if sequence is not None and sequence > highest:
            highest = sequence
    return format_identifier(prefix, highest + 1, width)


def is_well_formed(identifier: str, width: int = DEFAULT_SEQUENCE_WIDTH) -> bool:
    """True when ``identifier`` has the shape letters + 2 brand chars + digits."""
    head, digits = identifier[:-width], identifier[-width:]
    if len(identifier) <= width or not digits.isascii() or not digits.isdigit():
        return False
    category_part = head[:-BRAND_PREFIX_LENGTH]
    return (
        1 <= len(category_part) <= 2
        and category_part.isascii()
        and category_part.isalpha()
        and category_part.isupper()
    )
