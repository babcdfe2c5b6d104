"""
Values -- Immutable, self-validating ledger entities.

Responsibility:
    Defines Category, StockUnit, SoldRecord and StockUnitPatch: the only
    shapes that flow between the store adapters, the ledgers and callers.
    Every construction path validates, so a malformed store row is rejected
    at the boundary instead of surfacing later as a wrong total.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_record()/to_record() are the boundary converters to the plain
    dict records exchanged with a RecordStore.

Failure modes:
    - ValidationError on any missing, empty, or out-of-range field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping
from uuid import UUID, uuid4

from stock_kernel.db.types import money_from_value
from stock_kernel.exceptions import ValidationError

_PREFIX_CODE_PATTERN = re.compile(r"[A-Z]{1,2}")


class Grade(str, Enum):
    """Cosmetic grade of a unit. A is best."""

    A = "A"
    B = "B"
    C = "C"


def _require_text(field_name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field_name, "must be a non-empty string")
    return value.strip()


def _coerce_price(field_name: str, value: Any) -> Decimal:
    try:
        amount = money_from_value(value)
    except ValueError as exc:
        raise ValidationError(field_name, str(exc)) from exc
    if amount < 0:
        raise ValidationError(field_name, "must not be negative")
    return amount


def _coerce_grade(value: Any) -> Grade:
    if isinstance(value, Grade):
        return value
    try:
        return Grade(str(value).strip().upper())
    except ValueError as exc:
        raise ValidationError("grade", f"must be one of A, B, C (got {value!r})") from exc


def _coerce_timestamp(field_name: str, value: Any) -> datetime:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(field_name, f"not an ISO timestamp: {value!r}") from exc
    if not isinstance(value, datetime):
        raise ValidationError(field_name, "must be a datetime")
    # Some backends (SQLite) drop the offset; stored values are UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def normalize_prefix_code(value: Any) -> str:
    """Uppercase and validate a category prefix code (1-2 letters)."""
    code = _require_text("prefix_code", value).upper()
    if not _PREFIX_CODE_PATTERN.fullmatch(code):
        raise ValidationError("prefix_code", f"must be 1-2 letters (got {value!r})")
    return code


@dataclass(frozen=True, slots=True)
class Category:
    """
    A product category and its identifier prefix.

    Guarantees:
        - name is trimmed and non-empty.
        - prefix_code is 1-2 uppercase ASCII letters.
    """

    name: str
    prefix_code: str
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require_text("name", self.name))
        object.__setattr__(self, "prefix_code", normalize_prefix_code(self.prefix_code))
        if not isinstance(self.id, UUID):
            try:
                object.__setattr__(self, "id", UUID(str(self.id)))
            except ValueError as exc:
                raise ValidationError("id", f"not a UUID: {self.id!r}") from exc

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Category:
        try:
            return cls(
                id=record["id"],
                name=record["name"],
                prefix_code=record["prefix_code"],
            )
        except KeyError as exc:
            raise ValidationError(str(exc.args[0]), "missing from category record") from exc

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "prefix_code": self.prefix_code}


@dataclass(frozen=True, slots=True)
class StockUnit:
    """
    One physical unit currently in stock.

    Contract:
        ``id`` and ``category`` never change after creation; the other
        descriptive fields change only through StockUnitPatch.

    Guarantees:
        - purchase_price is a non-negative Decimal with two places.
        - created_at is timezone-aware.
    """

    id: str
    category: str
    brand_model: str
    grade: Grade
    purchase_price: Decimal
    condition: str
    created_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_text("id", self.id).upper())
        object.__setattr__(self, "category", _require_text("category", self.category))
        object.__setattr__(self, "brand_model", _require_text("brand_model", self.brand_model))
        object.__setattr__(self, "grade", _coerce_grade(self.grade))
        object.__setattr__(
            self, "purchase_price", _coerce_price("purchase_price", self.purchase_price)
        )
        if self.condition is None:
            object.__setattr__(self, "condition", "")
        elif not isinstance(self.condition, str):
            raise ValidationError("condition", "must be text")
        else:
            object.__setattr__(self, "condition", self.condition.strip())
        object.__setattr__(
            self, "created_at", _coerce_timestamp("created_at", self.created_at)
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> StockUnit:
        try:
            return cls(
                id=record["id"],
                category=record["category"],
                brand_model=record["brand_model"],
                grade=record["grade"],
                purchase_price=record["purchase_price"],
                condition=record.get("condition") or "",
                created_at=record["created_at"],
            )
        except KeyError as exc:
            raise ValidationError(str(exc.args[0]), "missing from inventory record") from exc

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "brand_model": self.brand_model,
            "grade": self.grade.value,
            "purchase_price": self.purchase_price,
            "condition": self.condition,
            "created_at": self.created_at,
        }

    def apply(self, patch: StockUnitPatch) -> StockUnit:
        """Return a copy with the patch's fields applied."""
        return replace(self, **patch.changes())


@dataclass(frozen=True, slots=True)
class SoldRecord:
    """
    A unit that has left stock.

    Created only through from_unit(); the sale price basis is the purchase
    price at the moment of exit.
    """

    id: str
    brand_model: str
    sale_price_basis: Decimal
    exited_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_text("id", self.id).upper())
        object.__setattr__(self, "brand_model", _require_text("brand_model", self.brand_model))
        object.__setattr__(
            self,
            "sale_price_basis",
            _coerce_price("sale_price_basis", self.sale_price_basis),
        )
        object.__setattr__(self, "exited_at", _coerce_timestamp("exited_at", self.exited_at))

    @classmethod
    def from_unit(cls, unit: StockUnit, exited_at: datetime) -> SoldRecord:
        return cls(
            id=unit.id,
            brand_model=unit.brand_model,
            sale_price_basis=unit.purchase_price,
            exited_at=exited_at,
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SoldRecord:
        try:
            return cls(
                id=record["id"],
                brand_model=record["brand_model"],
                sale_price_basis=record["sale_price_basis"],
                exited_at=record["exited_at"],
            )
        except KeyError as exc:
            raise ValidationError(str(exc.args[0]), "missing from sold record") from exc

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "brand_model": self.brand_model,
            "sale_price_basis": self.sale_price_basis,
            "exited_at": self.exited_at,
        }


@dataclass(frozen=True, slots=True)
class StockUnitPatch:
    """
    Subset of the mutable StockUnit fields to change.

    Fields left as None are untouched.  An empty patch is rejected.
    """

    brand_model: str | None = None
    grade: Grade | None = None
    purchase_price: Decimal | None = None
    condition: str | None = None

    def __post_init__(self) -> None:
        if self.brand_model is not None:
            object.__setattr__(
                self, "brand_model", _require_text("brand_model", self.brand_model)
            )
        if self.grade is not None:
            object.__setattr__(self, "grade", _coerce_grade(self.grade))
        if self.purchase_price is not None:
            object.__setattr__(
                self, "purchase_price", _coerce_price("purchase_price", self.purchase_price)
            )
        if self.condition is not None:
            if not isinstance(self.condition, str):
                raise ValidationError("condition", "must be text")
            object.__setattr__(self, "condition", self.condition.strip())
        if not self.changes():
            raise ValidationError("patch", "no mutable field given")

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def to_record(self) -> dict[str, Any]:
        record = self.changes()
        if "grade" in record:
            record["grade"] = record["grade"].value
        return record
