from decimal import Decimal

import pytest

from mundolar.pricing import (
    discount_percent, display_price, is_on_offer, pre_tax, price_with_iva, round_iva_price,
)

@pytest.mark.parametrize("price, expected", [
    (1000, 1500),      # 1190 -> 1500
    (5000, 6000),      # 5950 -> 6000
    (2100, 2500),      # 2499 -> 2500
    (100000, 119000),  # already a whole thousand
    (0, 0),
])
def test_price_with_iva(price, expected):
    assert price_with_iva(price) == expected

@pytest.mark.parametrize("amount, expected", [
    (1500, 1500),
    (500, 500),
    (1501, 2000),
    (1001, 1500),
    (2000, 2000),
    (1999.6, 2000),
])
def test_round_iva_price_boundaries(amount, expected):
    assert round_iva_price(amount) == expected

def test_displayed_prices_end_in_000_or_500():
    for price in range(0, 300000, 733):
        assert price_with_iva(price) % 1000 in (0, 500)

def test_display_price_prefers_stored_value():
    assert display_price(1000, 1785) == 1785
    assert display_price(1000, "1785") == 1785

def test_display_price_recomputes_when_stored_value_missing():
    assert display_price(1000, None) == 1500
    assert display_price(1000, 0) == 1500
    assert display_price(None) == 0

def test_pre_tax_inverts_multiplier():
    assert pre_tax(1190) == Decimal("1000")
    assert float(pre_tax(1000)) == pytest.approx(840.336, rel=1e-5)

def test_offer_detection():
    assert is_on_offer(80000, 100000)
    assert not is_on_offer(100000, 100000)
    assert not is_on_offer(100000, None)
    assert not is_on_offer(None, 100000)

def test_discount_percent():
    assert discount_percent(80000, 100000) == 20
    assert discount_percent(90, 100) == 10
    # truncated, not rounded
    assert discount_percent(2, 3) == 33
    assert discount_percent(100, 90) == 0
