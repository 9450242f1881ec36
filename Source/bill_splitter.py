"""
Bill Splitter module for Tabshare
Validates split conservation and runs the split pipeline
"""

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from allocation import allocate_split, split_evenly
from config import SPLIT_TOLERANCE
from constants import ZERO
from data_models import BillSplit, Individual, SplitResult, SplitValidation
from money import Number, calculate_subtotal, calculate_tip_from_percentage, round_currency, to_decimal
from response_parser import ResponseParser

logger = logging.getLogger(__name__)


def validate_split(individuals: Sequence[Individual], expected_total: Number,
                   tolerance: Number = SPLIT_TOLERANCE) -> SplitValidation:
    """Check that everyone's owed amounts add up to the expected total"""
    actual_total = sum((person.owed for person in individuals), ZERO)
    difference = round_currency(abs(actual_total - to_decimal(expected_total)))
    return SplitValidation(
        is_valid=difference <= to_decimal(tolerance),
        difference=difference,
    )


class BillSplitter:
    """Turns a split service response (or an even split request) into a SplitResult.

    Amounts proposed by the service are not trusted: each person's subtotal,
    tax share, tip share and owed amount are recomputed from their items, then
    checked against the receipt total. A mismatch is reported on the result,
    the split itself is still returned.
    """

    def __init__(self, tolerance: Number = SPLIT_TOLERANCE, parser: Optional[ResponseParser] = None):
        self.tolerance = to_decimal(tolerance)
        self.parser = parser or ResponseParser()

    def split_text(self, text: str, tip_percentage: Optional[Number] = None,
                   tax: Optional[Number] = None) -> SplitResult:
        """Run the pipeline on raw text from the split service"""
        draft = self.parser.parse_text(text)
        return self._recompute(draft, tip_percentage, tax)

    def split_payload(self, payload: Any, tip_percentage: Optional[Number] = None,
                      tax: Optional[Number] = None) -> SplitResult:
        """Run the pipeline on an already decoded payload"""
        draft = self.parser.normalize(payload)
        return self._recompute(draft, tip_percentage, tax)

    def split_evenly(self, total: Number, names: Sequence[str]) -> SplitResult:
        total = round_currency(total)
        individuals = split_evenly(total, len(names), names)
        validation = validate_split(individuals, total, self.tolerance)
        return SplitResult(
            bill_split=BillSplit(total=total, individuals=individuals),
            validation=validation,
        )

    def _recompute(self, draft: BillSplit, tip_percentage: Optional[Number],
                   tax: Optional[Number]) -> SplitResult:
        tax_pool = self._pool(draft, 'tax_share') if tax is None else round_currency(tax)

        if tip_percentage is None:
            tip_pool = self._pool(draft, 'tip_share')
        else:
            item_subtotal = calculate_subtotal(item for person in draft.individuals for item in person.items)
            tip_pool = calculate_tip_from_percentage(item_subtotal, tip_percentage)

        bill_split = allocate_split(draft.individuals, tax_pool, tip_pool)
        validation = validate_split(bill_split.individuals, draft.total, self.tolerance)

        if not validation.is_valid:
            logger.warning(
                "Split does not add up: owed %s vs receipt total %s (difference %s)",
                bill_split.total_owed, draft.total, validation.difference,
            )

        return SplitResult(
            bill_split=bill_split,
            validation=validation,
            tax=tax_pool,
            tip=tip_pool,
        )

    @staticmethod
    def _pool(draft: BillSplit, attribute: str) -> Decimal:
        return round_currency(sum((getattr(person, attribute) for person in draft.individuals), ZERO))
