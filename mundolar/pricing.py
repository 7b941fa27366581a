"""IVA (19%) pricing rules shared by every place a price is displayed.

Stored prices are pre-tax. Displayed prices are tax-inclusive and snapped to a
500 peso boundary, so they always end in ``000`` or ``500``.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, Decimal, str]

IVA_RATE = Decimal("0.19")
IVA_MULTIPLIER = Decimal("1") + IVA_RATE

_THOUSAND = Decimal("1000")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_iva_price(amount: Number) -> int:
    """Snap a tax-inclusive amount to the storefront's 500 peso boundary.

    - A whole thousand is kept as is.
    - A remainder up to and including 500 becomes ``...500``.
    - Anything above 500 goes up to the next thousand.
    """
    rounded = _to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    remainder = rounded % _THOUSAND
    if remainder == 0:
        return int(rounded)
    if remainder <= 500:
        return int((rounded / _THOUSAND).to_integral_value(rounding=ROUND_FLOOR) * _THOUSAND + 500)
    return int((rounded / _THOUSAND).to_integral_value(rounding=ROUND_CEILING) * _THOUSAND)


def price_with_iva(price: Number) -> int:
    """Tax-inclusive display amount for a pre-tax price."""
    return round_iva_price(_to_decimal(price) * IVA_MULTIPLIER)


def display_price(price: Optional[Number], precomputed: Optional[Number] = None) -> int:
    """Price to show to a customer.

    A stored ``price_with_iva`` wins over recomputing it from ``price`` so the
    storefront never drifts from what the admin saved.
    """
    if precomputed not in (None, "", 0):
        return int(_to_decimal(precomputed))
    if price in (None, ""):
        return 0
    return price_with_iva(price)


def pre_tax(displayed: Number) -> Decimal:
    """Inverse of the IVA multiplication, used to filter on stored prices."""
    return _to_decimal(displayed) / IVA_MULTIPLIER


def is_on_offer(price: Optional[Number], original_price: Optional[Number]) -> bool:
    if original_price in (None, "") or price in (None, ""):
        return False
    return _to_decimal(original_price) > _to_decimal(price)


def discount_percent(price: Optional[Number], original_price: Optional[Number]) -> int:
    if not is_on_offer(price, original_price):
        return 0
    original = _to_decimal(original_price)
    return int((original - _to_decimal(price)) / original * 100)
