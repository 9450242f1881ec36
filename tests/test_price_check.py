from decimal import Decimal

import pytest

from data_models import PriceComparison
from price_check import calculate_rip_off_score, calculate_total_overpayment, is_overpriced


def _cmp(receipt, average, name="item"):
    return PriceComparison(name, Decimal(str(receipt)), Decimal(str(average)))


@pytest.mark.parametrize("actual, average, expected", [
    (12.00, 10.00, False),   # exactly 20% is not over the threshold
    (12.01, 10.00, True),
    (9.00, 10.00, False),
    (5.00, 0, False),
])
def test_is_overpriced_default_threshold(actual, average, expected):
    assert is_overpriced(actual, average) is expected


def test_is_overpriced_custom_threshold():
    assert is_overpriced(11, 10, threshold_percent=5)
    assert not is_overpriced(11, 10, threshold_percent=10)


def test_rip_off_score_no_comparisons():
    assert calculate_rip_off_score([]) == 1


def test_rip_off_score_fair_prices():
    assert calculate_rip_off_score([_cmp(10, 10), _cmp(4, 5)]) == 1


def test_rip_off_score_scales_with_overpricing():
    # 25% average overpricing -> ceil(2.5) + 1
    assert calculate_rip_off_score([_cmp(12.5, 10), _cmp(5, 4)]) == 4


def test_rip_off_score_ignores_bargains():
    # (50% + 0%) / 2 = 25%
    assert calculate_rip_off_score([_cmp(15, 10), _cmp(5, 10)]) == 4


def test_rip_off_score_caps_at_ten():
    assert calculate_rip_off_score([_cmp(100, 10)]) == 10


def test_total_overpayment():
    comparisons = [_cmp(12.49, 10), _cmp(3, 4), _cmp(7.333, 7)]
    assert calculate_total_overpayment(comparisons) == Decimal("2.82")


def test_total_overpayment_empty():
    assert calculate_total_overpayment([]) == Decimal("0.00")
