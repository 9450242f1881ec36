"""
Money arithmetic for Tabshare

Every monetary value leaving this package goes through round_currency, so
all components agree on 2-decimal, round-half-up semantics.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

from constants import DECIMAL_QUANTIZE, ZERO, CURRENCY_SYMBOLS, PREFIX_CURRENCIES
from data_models import LineItem

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert a number (or numeric string) to a finite Decimal"""
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Not a monetary value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite monetary value: {value!r}")
    return result


def round_currency(value: Number) -> Decimal:
    """Round to the nearest cent, halves away from zero"""
    try:
        return to_decimal(value).quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # Too many digits for the decimal context
        raise ValueError(f"Monetary value out of range: {value!r}") from exc


def percentage_difference(actual: Number, expected: Number) -> Decimal:
    """Percent by which actual exceeds expected; 0 when expected is 0"""
    expected = to_decimal(expected)
    if expected == 0:
        return ZERO
    actual = to_decimal(actual)
    return round_currency((actual - expected) / expected * HUNDRED)


def calculate_tip_from_percentage(subtotal: Number, tip_percentage: Number) -> Decimal:
    return round_currency(to_decimal(subtotal) * to_decimal(tip_percentage) / HUNDRED)


def calculate_subtotal(items: Iterable[LineItem]) -> Decimal:
    return round_currency(sum((item.line_total for item in items), ZERO))


def calculate_individual_total(items: Iterable[LineItem], tax_share: Number, tip_share: Number) -> Decimal:
    """Item subtotal plus tax and tip shares"""
    subtotal = sum((item.line_total for item in items), ZERO)
    return round_currency(subtotal + to_decimal(tax_share) + to_decimal(tip_share))


def format_currency(amount: Number, currency: str = 'USD') -> str:
    """Format currency amount with proper symbols, for display only"""
    value = round_currency(amount)
    code = (currency or 'USD').upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    sign = '-' if value < 0 else ''
    digits = f"{abs(value):,.2f}"

    if code in PREFIX_CURRENCIES:
        return f"{sign}{symbol}{digits}"
    return f"{sign}{digits} {symbol}"
