"""
Wire schemas for Tabshare split responses

Pydantic models for the JSON the vision model sends back. They check shape
and types only; ResponseParser builds the frozen data_models from them.
"""

from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from config import MAX_AMOUNT, MAX_QUANTITY
from constants import ZERO, FIELD_TAX_SHARE, FIELD_TIP_SHARE
from money import round_currency


def _amount(value: Any) -> Decimal:
    """Round a wire number to cents; booleans, text and non-finite values fail"""
    amount = round_currency(value)
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"amount is larger than {MAX_AMOUNT}")
    return amount


def _optional_amount(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return _amount(value)


Amount = Annotated[Decimal, BeforeValidator(_amount)]
Price = Annotated[Decimal, Field(ge=0), BeforeValidator(_amount)]
OptionalAmount = Annotated[Decimal, BeforeValidator(_optional_amount)]


class ItemPayload(BaseModel):
    """A line item assigned to one person"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, description="Item name as printed on the receipt")
    price: Price = Field(description="Unit price")
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    category: Optional[str] = None

    @field_validator('quantity', mode='before')
    @classmethod
    def _whole_quantity(cls, value):
        if value is None:
            return 1
        if isinstance(value, bool):
            raise ValueError("quantity is not a whole number")
        return value

    @field_validator('category', mode='before')
    @classmethod
    def _text_category(cls, value):
        if isinstance(value, str) and value.strip():
            return value
        return None


class PersonPayload(BaseModel):
    """One person's draft share; amounts are kept as reported"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    items: List[ItemPayload] = Field(default_factory=list)
    subtotal: OptionalAmount = ZERO
    tax_share: OptionalAmount = Field(default=ZERO, alias=FIELD_TAX_SHARE)
    tip_share: OptionalAmount = Field(default=ZERO, alias=FIELD_TIP_SHARE)
    owed: OptionalAmount = ZERO

    @field_validator('items', mode='before')
    @classmethod
    def _no_items(cls, value):
        return [] if value is None else value


class SplitPayload(BaseModel):
    """The whole draft split: receipt total and the people sharing it"""

    total: Amount = Field(description="Grand total printed on the receipt")
    individuals: List[PersonPayload] = Field(min_length=1)
