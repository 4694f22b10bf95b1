# shop/order_message.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from urllib.parse import quote

from django.conf import settings

from .pricing import format_money, line_total, order_total, subtotal, to_decimal

# Same characters encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "-_.!~*'()"

RULE = "━━━━━━━━━━━━━━━━━━"


@dataclass(frozen=True)
class CustomerInfo:
    phone: str
    district: str
    city: str = ""
    payment_method: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name in ("phone", "district") if not (getattr(self, name) or "").strip()]


def render_order_message(
    items: Iterable,
    delivery_charge,
    info: CustomerInfo,
    payment_method: str | None = None,
    language: str | None = None,
    shop_name: str | None = None,
) -> str:
    """
    Plain-text order summary for the shop's WhatsApp inbox.

    ``payment_method`` overrides ``info.payment_method`` when given.
    ``language`` only picks the item names; labels stay in English for staff.
    """
    items = list(items)
    shop_name = shop_name or getattr(settings, "SHOP_NAME", "")
    delivery = to_decimal(delivery_charge)
    sub = subtotal(items)
    payment = payment_method or info.payment_method

    lines = [f"🛒 *New Order - {shop_name}*", ""]
    lines.append(f"📱 *Phone:* {info.phone.strip()}")
    lines.append(f"📍 *District:* {info.district.strip()}")
    if info.city and info.city.strip():
        lines.append(f"🏙️ *City:* {info.city.strip()}")
    if payment:
        lines.append(f"💳 *Payment:* {payment}")
    lines += ["", RULE, "📦 *Order Items:*", ""]

    for index, item in enumerate(items, start=1):
        name = item.display_name(language) if hasattr(item, "display_name") else str(item.name)
        lines.append(f"{index}. *{name}*")
        lines.append(f"   Qty: {item.quantity} × {format_money(item.unit_price)}")
        lines.append(f"   = {format_money(line_total(item))}")
        lines.append("")

    lines.append(RULE)
    lines.append(f"📋 *Subtotal:* {format_money(sub)}")
    lines.append(f"🚚 *Delivery:* {format_money(delivery)}")
    lines.append(f"💰 *Total:* {format_money(order_total(items, delivery))}")
    lines += [RULE, "", f"Thank you for shopping with {shop_name}! 🙏"]
    return "\n".join(lines)


def compose_order_message(items, delivery_charge, info: CustomerInfo, payment_method=None, language=None) -> str:
    """The rendered summary, percent-encoded for a ?text= query parameter."""
    text = render_order_message(items, delivery_charge, info, payment_method, language)
    return quote(text, safe=URI_COMPONENT_SAFE)
