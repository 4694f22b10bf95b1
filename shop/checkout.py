# shop/checkout.py
from __future__ import annotations

import logging
from typing import Callable

from django.conf import settings
from django.utils.translation import gettext as _

from .exceptions import EmptyCartError, IncompleteCustomerInfoError
from .notifications import ERROR, send
from .order_message import CustomerInfo, compose_order_message

logger = logging.getLogger(__name__)

# Used only when WHATSAPP_NUMBER is not configured (see shop.checks)
DEFAULT_WHATSAPP_NUMBER = "94112345678"
DEFAULT_MESSAGING_HOST = "wa.me"


def normalize_number(value) -> str:
    """Digits only: "+94 77-123 4567" becomes "94771234567"."""
    return "".join(ch for ch in str(value or "") if ch.isdigit())


def resolve_destination(configured: str | None = None) -> str:
    number = configured if configured is not None else getattr(settings, "SHOP_WHATSAPP_NUMBER", "")
    number = normalize_number(number)
    if not number:
        logger.warning("WHATSAPP_NUMBER is not set; orders go to the default %s", DEFAULT_WHATSAPP_NUMBER)
        return DEFAULT_WHATSAPP_NUMBER
    return number


def build_deep_link(destination: str, encoded_text: str, host: str | None = None) -> str:
    host = host or getattr(settings, "SHOP_MESSAGING_HOST", "") or DEFAULT_MESSAGING_HOST
    return f"https://{host}/{destination}?text={encoded_text}"


class CheckoutDispatcher:
    """
    Hands a cart over to the shop's WhatsApp as a pre-filled message.

    ``launch`` receives the deep link (the views turn it into a redirect).
    The cart is left untouched after dispatch so the customer can retry;
    pass ``clear_after_dispatch=True`` to empty it instead.
    """

    def __init__(
        self,
        cart,
        destination: str | None = None,
        launch: Callable[[str], object] | None = None,
        notify: Callable[[str, str], None] | None = None,
        messaging_host: str | None = None,
        clear_after_dispatch: bool | None = None,
    ):
        self.cart = cart
        self.destination = destination
        self.launch = launch
        self.notify = notify if notify is not None else getattr(cart, "notify", None)
        self.messaging_host = messaging_host
        if clear_after_dispatch is None:
            clear_after_dispatch = getattr(settings, "SHOP_CLEAR_CART_AFTER_CHECKOUT", False)
        self.clear_after_dispatch = clear_after_dispatch

    def validate(self, info: CustomerInfo) -> None:
        if self.cart.is_empty():
            send(self.notify, ERROR, _("Your cart is empty"))
            raise EmptyCartError("cannot check out an empty cart")
        missing = info.missing_fields()
        if missing:
            send(self.notify, ERROR, _("Please enter your phone number and district."))
            raise IncompleteCustomerInfoError(missing)

    def dispatch(self, delivery_charge, info: CustomerInfo, payment_method: str | None = None, language=None) -> str:
        self.validate(info)

        text = compose_order_message(self.cart.items, delivery_charge, info, payment_method, language)
        url = build_deep_link(resolve_destination(self.destination), text, self.messaging_host)
        logger.info(
            "Dispatching order: %d item(s), subtotal %s, district %s",
            self.cart.item_count(), self.cart.subtotal(), info.district,
        )
        if self.launch is not None:
            self.launch(url)

        if self.clear_after_dispatch:
            self.cart.clear()
        return url
