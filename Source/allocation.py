"""
Allocation module for Tabshare
Proportional tax/tip shares and even splits
"""

from typing import List, Sequence

from constants import ZERO
from data_models import BillSplit, Individual
from money import Number, calculate_subtotal, round_currency, to_decimal


def _proportional_share(individual_subtotal: Number, total_subtotal: Number, pool_amount: Number):
    total_subtotal = to_decimal(total_subtotal)
    if total_subtotal == 0:
        return ZERO
    proportion = to_decimal(individual_subtotal) / total_subtotal
    return round_currency(to_decimal(pool_amount) * proportion)


def calculate_tax_share(individual_subtotal: Number, total_subtotal: Number, total_tax: Number):
    """Tax owed by one person, proportional to their share of the subtotal.

    Each share is rounded on its own, so the shares of a group can drift
    from the tax by up to a cent per extra person. The validator catches it.
    """
    return _proportional_share(individual_subtotal, total_subtotal, total_tax)


def calculate_tip_share(individual_subtotal: Number, total_subtotal: Number, tip_amount: Number):
    """Tip owed by one person, proportional to their share of the subtotal"""
    return _proportional_share(individual_subtotal, total_subtotal, tip_amount)


def allocate_split(individuals: Sequence[Individual], tax: Number, tip: Number) -> BillSplit:
    """Recompute subtotals, shares and owed amounts from each person's items"""
    tax = round_currency(tax)
    tip = round_currency(tip)

    subtotals = [calculate_subtotal(person.items) for person in individuals]
    total_subtotal = sum(subtotals, ZERO)

    allocated = []
    for person, subtotal in zip(individuals, subtotals):
        tax_share = calculate_tax_share(subtotal, total_subtotal, tax)
        tip_share = calculate_tip_share(subtotal, total_subtotal, tip)
        allocated.append(Individual(
            name=person.name,
            items=list(person.items),
            subtotal=subtotal,
            tax_share=tax_share,
            tip_share=tip_share,
            owed=round_currency(subtotal + tax_share + tip_share),
        ))

    return BillSplit(
        total=round_currency(total_subtotal + tax + tip),
        individuals=allocated,
    )


def split_evenly(total: Number, number_of_people: int, names: Sequence[str]) -> List[Individual]:
    """Split a total equally; the first person absorbs the rounding remainder.

    ``names`` decides who is in the split, ``number_of_people`` the divisor.
    """
    if number_of_people <= 0 or not names:
        return []

    total = to_decimal(total)
    per_person = round_currency(total / number_of_people)
    remainder = round_currency(total - per_person * number_of_people)

    individuals = []
    for index, name in enumerate(names):
        owed = per_person + remainder if index == 0 else per_person
        individuals.append(Individual(
            name=name,
            items=[],
            subtotal=per_person,
            tax_share=ZERO,
            tip_share=ZERO,
            owed=round_currency(owed),
        ))
    return individuals
