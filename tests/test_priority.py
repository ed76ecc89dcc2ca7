from decimal import Decimal

import pytest

from app.utils.decimal_utils import line_amount, sum_amounts
from app.utils.priority import calculate_priority, to_base_amount


@pytest.mark.parametrize(
    "amount,currency,rate,expected",
    [
        (Decimal("1000000"), "PHP", Decimal("1"), "high"),
        (Decimal("999999.99"), "PHP", Decimal("1"), "medium"),
        (Decimal("100000"), "PHP", Decimal("1"), "medium"),
        (Decimal("99999.99"), "PHP", Decimal("1"), "low"),
        (Decimal("20000"), "USD", Decimal("56"), "high"),
        (Decimal("2000"), "USD", Decimal("56"), "medium"),
        (0, "PHP", 1, "low"),
    ],
)
def test_priority_bands(amount, currency, rate, expected):
    assert calculate_priority(amount, currency, rate) == expected


def test_base_currency_ignores_exchange_rate():
    assert to_base_amount(Decimal("500"), "php", Decimal("56")) == Decimal("500")


def test_custom_thresholds():
    assert calculate_priority(Decimal("600"), "PHP", 1, high_threshold=500, medium_threshold=100) == "high"


def test_line_amounts_round_half_up():
    assert line_amount(Decimal("3"), Decimal("0.335")) == Decimal("1.02")
    assert sum_amounts([Decimal("1.005"), "2.10", None]) == Decimal("3.11")
