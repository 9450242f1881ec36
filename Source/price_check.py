"""
Price check module for Tabshare
Flags overpriced receipt items against typical market prices
"""

import math
from decimal import Decimal
from typing import Sequence

from config import OVERPRICED_THRESHOLD
from constants import ZERO
from data_models import PriceComparison
from money import Number, percentage_difference, round_currency, to_decimal


def is_overpriced(actual_price: Number, average_price: Number,
                  threshold_percent: Number = OVERPRICED_THRESHOLD) -> bool:
    return percentage_difference(actual_price, average_price) > to_decimal(threshold_percent)


def calculate_rip_off_score(comparisons: Sequence[PriceComparison]) -> int:
    """Score from 1 (fair prices) to 10 (100%+ average overpricing)"""
    if not comparisons:
        return 1

    # Underpriced items do not offset overpriced ones
    total_overpricing = sum(
        (max(ZERO, percentage_difference(c.receipt_price, c.average_price)) for c in comparisons),
        ZERO,
    )
    average_overpricing = total_overpricing / len(comparisons)

    return min(10, max(1, math.ceil(average_overpricing / 10) + 1))


def calculate_total_overpayment(comparisons: Sequence[PriceComparison]) -> Decimal:
    overpayment = ZERO
    for comparison in comparisons:
        difference = to_decimal(comparison.receipt_price) - to_decimal(comparison.average_price)
        if difference > 0:
            overpayment += difference
    return round_currency(overpayment)
