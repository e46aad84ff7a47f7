import random
from decimal import Decimal

import pytest

from stayledger.core.models import CITY_TAX_VIENNA
from stayledger.core.tax import (
    compute_tax_breakdown_a,
    compute_tax_breakdown_b,
    format_currency,
    format_decimal,
    round2,
)


def test_formula_a_default_rates():
    t = compute_tax_breakdown_a(110)
    assert (t.net, t.vat, t.city_tax, t.gross) == (
        Decimal("97.17"), Decimal("9.72"), Decimal("3.11"), Decimal("110.00"),
    )
    assert t.total is None


def test_formula_a_difference_goes_to_vat():
    t = compute_tax_breakdown_a(100)
    # 100 / 1.132 = 88.339..., 8.833..., 2.826...: 88.34 + 8.83 + 2.83 = 100.00
    assert t.net == Decimal("88.34")
    assert t.city_tax == Decimal("2.83")
    assert t.net + t.vat + t.city_tax == Decimal("100.00")


def test_formula_a_accepts_float_input():
    t = compute_tax_breakdown_a(0.1 + 0.2)
    assert t.gross == Decimal("0.30")
    assert t.net + t.vat + t.city_tax == t.gross


def test_formula_a_sum_equals_gross_randomised():
    rng = random.Random(20250702)
    for _ in range(10000):
        gross = round(rng.uniform(0.01, 25000), 2)
        vat_rate = rng.choice([0.10, 0.13, 0.20, round(rng.random() * 0.99, 3)])
        city_rate = rng.choice([0.032, 0.0, round(rng.random() * 0.99, 3)])
        t = compute_tax_breakdown_a(gross, vat_rate, city_rate)
        assert t.net + t.vat + t.city_tax == round2(gross), (gross, vat_rate, city_rate)


def test_formula_b_simple():
    t = compute_tax_breakdown_b(100)
    assert (t.net, t.vat, t.city_tax, t.gross, t.total) == (
        Decimal("90.91"), Decimal("9.09"), Decimal("3.20"), Decimal("100.00"), Decimal("103.20"),
    )


def test_formula_b_vienna_method_uses_net():
    t = compute_tax_breakdown_b(110, 0.10, 0.032, CITY_TAX_VIENNA)
    assert (t.net, t.vat, t.city_tax, t.total) == (
        Decimal("100.00"), Decimal("10.00"), Decimal("3.20"), Decimal("113.20"),
    )


def test_formula_b_city_tax_is_added_not_extracted():
    t = compute_tax_breakdown_b(250, 0.10, 0.032)
    assert t.net + t.vat == t.gross
    assert t.total == t.gross + t.city_tax


@pytest.mark.parametrize("value,comma,expected", [
    (110, False, "110.00"),
    (Decimal("-97.17"), False, "-97.17"),
    (Decimal("-9.72"), True, "-9,72"),
    (Decimal("-0.00"), False, "0.00"),
    (1234.5, True, "1234,50"),
])
def test_format_decimal(value, comma, expected):
    assert format_decimal(value, comma) == expected


def test_format_currency():
    assert format_currency(Decimal("1234.56")) == "1.234,56 €"
    assert format_currency(-10) == "-10,00 €"
    assert format_currency(5, "CHF") == "5,00 CHF"
