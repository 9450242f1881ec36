"""
Data models for Tabshare - Receipt line items and bill splits
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from constants import (
    ZERO, FIELD_TOTAL, FIELD_INDIVIDUALS, FIELD_NAME, FIELD_ITEMS, FIELD_SUBTOTAL,
    FIELD_TAX_SHARE, FIELD_TIP_SHARE, FIELD_OWED, FIELD_PRICE, FIELD_QUANTITY,
    FIELD_CATEGORY,
)


@dataclass(frozen=True)
class LineItem:
    """Represents a single item on a receipt"""
    name: str
    price: Decimal = ZERO
    quantity: int = 1
    category: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        data = {
            FIELD_NAME: self.name,
            FIELD_PRICE: float(self.price),
            FIELD_QUANTITY: self.quantity,
        }
        if self.category:
            data[FIELD_CATEGORY] = self.category
        return data


@dataclass(frozen=True)
class Individual:
    """One person's share of a bill"""
    name: str
    items: List[LineItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    tax_share: Decimal = ZERO
    tip_share: Decimal = ZERO
    owed: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            FIELD_NAME: self.name,
            FIELD_ITEMS: [item.to_dict() for item in self.items],
            FIELD_SUBTOTAL: float(self.subtotal),
            FIELD_TAX_SHARE: float(self.tax_share),
            FIELD_TIP_SHARE: float(self.tip_share),
            FIELD_OWED: float(self.owed),
        }


@dataclass(frozen=True)
class BillSplit:
    """The whole split: grand total and who owes what"""
    total: Decimal
    individuals: List[Individual] = field(default_factory=list)

    @property
    def total_owed(self) -> Decimal:
        return sum((person.owed for person in self.individuals), ZERO)

    def to_dict(self) -> dict:
        return {
            FIELD_TOTAL: float(self.total),
            FIELD_INDIVIDUALS: [person.to_dict() for person in self.individuals],
        }


@dataclass(frozen=True)
class SplitValidation:
    """Outcome of a conservation check"""
    is_valid: bool
    difference: Decimal


@dataclass(frozen=True)
class SplitResult:
    """A computed split together with its conservation check"""
    bill_split: BillSplit
    validation: SplitValidation
    tax: Decimal = ZERO
    tip: Decimal = ZERO

    @property
    def has_mismatch(self) -> bool:
        return not self.validation.is_valid


@dataclass(frozen=True)
class PriceComparison:
    """A receipt price next to the typical market price for the same item"""
    item_name: str
    receipt_price: Decimal
    average_price: Decimal


@dataclass
class RequestMetrics:
    """Metrics for the last vision service call"""
    attempts: int = 0
    latency_seconds: float = 0.0
    image_bytes: int = 0
    response_chars: int = 0
    status_code: Optional[int] = None
