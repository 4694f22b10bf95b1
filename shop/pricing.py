# shop/pricing.py
"""
Totals over cart line items.

Everything here is a pure function of its arguments: no session, no
database. Line items only need ``unit_price`` and ``quantity`` attributes,
and anything unparseable in those counts as 0 instead of poisoning a total.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable

from django.conf import settings

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not d.is_finite():
        return ZERO
    return d


def to_quantity(value) -> int:
    """Whole units only; '3', 3.0 and Decimal('3') are all 3, '2.5' is 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    d = to_decimal(value)
    if d != d.to_integral_value():
        return 0
    return int(d)


def line_total(item) -> Decimal:
    return to_decimal(getattr(item, "unit_price", None)) * to_quantity(getattr(item, "quantity", None))


def subtotal(items: Iterable) -> Decimal:
    return sum((line_total(it) for it in items), start=ZERO)


def item_count(items: Iterable) -> int:
    return sum(to_quantity(getattr(it, "quantity", None)) for it in items)


def unique_item_count(items: Iterable) -> int:
    return sum(1 for _ in items)


def order_total(items: Iterable, delivery_charge=None) -> Decimal:
    return subtotal(items) + to_decimal(delivery_charge)


def format_money(value, symbol: str | None = None) -> str:
    """'Rs. 7,500' for whole amounts, 'Rs. 1,250.50' otherwise."""
    if symbol is None:
        symbol = getattr(settings, "SHOP_CURRENCY_SYMBOL", "Rs.")
    amount = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    if amount == amount.to_integral_value():
        text = f"{amount:,.0f}"
    else:
        text = f"{amount:,.2f}"
    return f"{symbol} {text}".strip()
