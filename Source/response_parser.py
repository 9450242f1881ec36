"""
Response Parser module for Tabshare
Turns the untrusted JSON returned by the split service into a BillSplit
"""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Sequence, Union

from pydantic import ValidationError

from config import RESPONSE_EXCERPT_CHARS
from constants import PATTERNS, FIELD_INDIVIDUALS
from data_models import BillSplit, Individual, LineItem
from errors import EmptyAllocationError, MalformedResponseError
from schemas import PersonPayload, SplitPayload

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around a JSON document"""
    cleaned = text.strip()
    cleaned = re.sub(PATTERNS['fence_open'], '', cleaned)
    cleaned = re.sub(PATTERNS['fence_close'], '', cleaned)
    return cleaned.strip()


def _excerpt(value: Any) -> str:
    text = value if isinstance(value, str) else repr(value)
    if len(text) > RESPONSE_EXCERPT_CHARS:
        return text[:RESPONSE_EXCERPT_CHARS] + "..."
    return text


def _field_path(loc: Sequence[Union[str, int]]) -> str:
    """Render a validation location as individuals[0].items[1].price"""
    path = ''
    for part in loc:
        if isinstance(part, int):
            path += f'[{part}]'
        elif path:
            path += f'.{part}'
        else:
            path = str(part)
    return path


class ResponseParser:
    """Validates a split payload and builds typed models from it.

    This is a gate, not a fixer: anything structurally wrong raises, and
    per-person amounts are copied as given rather than inferred.
    """

    def parse_text(self, text: str) -> BillSplit:
        """Decode the raw model text and normalize it"""
        if not isinstance(text, str) or not text.strip():
            raise MalformedResponseError("empty response from split service", excerpt=_excerpt(text))

        cleaned = strip_code_fences(text)
        try:
            payload = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            logger.warning("Split response is not valid JSON: %s", exc)
            raise MalformedResponseError(
                f"response is not valid JSON: {exc.msg}",
                excerpt=_excerpt(cleaned),
            ) from exc

        return self.normalize(payload)

    def normalize(self, payload: Any) -> BillSplit:
        """Check the payload shape in order and build the BillSplit"""
        if not isinstance(payload, Mapping):
            raise MalformedResponseError("response is not a JSON object", excerpt=_excerpt(payload))

        raw_individuals = payload.get(FIELD_INDIVIDUALS)
        if not isinstance(raw_individuals, list):
            logger.warning("Split response has no individuals list")
            raise MalformedResponseError(
                "missing individuals list",
                field=FIELD_INDIVIDUALS,
                excerpt=_excerpt(payload),
            )

        if not raw_individuals:
            logger.warning("Split response assigned the bill to nobody")
            raise EmptyAllocationError(
                "individuals list is empty",
                field=FIELD_INDIVIDUALS,
                excerpt=_excerpt(payload),
            )

        try:
            parsed = SplitPayload.model_validate(payload)
        except ValidationError as exc:
            # Fields validate in declaration order, so total is reported before people
            error = exc.errors()[0]
            field = _field_path(error['loc'])
            logger.warning("Split response rejected at %s: %s", field, error['msg'])
            raise MalformedResponseError(
                error['msg'],
                field=field,
                excerpt=_excerpt(error.get('input')),
            ) from exc

        individuals = [self._build_individual(person) for person in parsed.individuals]

        logger.debug("Normalized split: %d people, total %s", len(individuals), parsed.total)
        return BillSplit(total=parsed.total, individuals=individuals)

    @staticmethod
    def _build_individual(person: PersonPayload) -> Individual:
        return Individual(
            name=person.name,
            items=[
                LineItem(name=item.name, price=item.price, quantity=item.quantity, category=item.category)
                for item in person.items
            ],
            subtotal=person.subtotal,
            tax_share=person.tax_share,
            tip_share=person.tip_share,
            owed=person.owed,
        )
