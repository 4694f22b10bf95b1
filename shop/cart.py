# shop/cart.py
"""
Shopping cart kept in a small key-value store.

The whole cart is one JSON list under a single key and is rewritten on
every mutation. In the shop the store is the visitor's session
(``SessionStorage``); tests and scripts can use ``MemoryStorage``.

A storage write that fails is logged and otherwise ignored: the in-memory
cart stays authoritative for the rest of the request. Bad persisted data is
dropped entry by entry on load, never raised.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterator

from django.conf import settings
from django.utils.translation import gettext as _

from . import pricing
from .exceptions import (
    InvalidProductError,
    ItemNotFoundError,
    PersistenceReadError,
    PersistenceWriteError,
)
from .notifications import ERROR, SUCCESS, MessagesNotifier, send

logger = logging.getLogger(__name__)

CART_KEY = "danudara_cart"


# ---------------------------------------------------------
# Storage backends: get(key) -> str | None, set(key, str)
# ---------------------------------------------------------

class MemoryStorage:
    def __init__(self, initial: dict | None = None):
        self.data = dict(initial or {})

    def get(self, key: str):
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SessionStorage:
    def __init__(self, session):
        self.session = session

    def get(self, key: str):
        return self.session.get(key)

    def set(self, key: str, value: str) -> None:
        self.session[key] = value
        self.session.modified = True


# ---------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------

def _field(product, name: str, default=None):
    if isinstance(product, dict):
        return product.get(name, default)
    return getattr(product, name, default)


def _parse_price(value) -> Decimal | None:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite() or d < 0:
        return None
    return d


def _parse_int(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite() or d != d.to_integral_value():
        return None
    return int(d)


def _localized_names(product) -> dict[str, str]:
    if isinstance(product, dict):
        pairs = ((k[len("name_"):], v) for k, v in product.items() if k.startswith("name_"))
    else:
        codes = [code for code, _label in getattr(settings, "LANGUAGES", [])]
        pairs = ((code, getattr(product, f"name_{code}", None)) for code in codes)
    return {code: str(v) for code, v in pairs if v}


# ---------------------------------------------------------
# Line items
# ---------------------------------------------------------

@dataclass
class LineItem:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    names: dict[str, str] = field(default_factory=dict)
    original_price: Decimal | None = None
    image: str = ""

    @classmethod
    def from_product(cls, product, quantity: int = 1) -> "LineItem":
        """Snapshot a catalog product ({id, name, price, name_<lang>, original_price, image_url})."""
        if product is None:
            raise InvalidProductError("no product given")
        pid = _field(product, "id")
        if pid is None or str(pid).strip() == "":
            raise InvalidProductError("product has no id")
        price = _parse_price(_field(product, "price"))
        if price is None:
            raise InvalidProductError(f"product {pid} has no usable price")
        pid = str(pid).strip()
        return cls(
            product_id=pid,
            name=str(_field(product, "name") or pid),
            unit_price=price,
            quantity=quantity,
            names=_localized_names(product),
            original_price=_parse_price(_field(product, "original_price")),
            image=str(_field(product, "image_url") or ""),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Rebuild a persisted entry; raises ValueError/TypeError when it is unusable."""
        if not isinstance(data, dict):
            raise TypeError(f"cart entry must be an object, got {type(data).__name__}")
        pid = data.get("id")
        if pid is None or str(pid).strip() == "":
            raise ValueError("missing id")
        price = _parse_price(data.get("price"))
        if price is None:
            raise ValueError(f"bad price for {pid}: {data.get('price')!r}")
        qty = _parse_int(data.get("quantity"))
        if qty is None or qty < 1:
            raise ValueError(f"bad quantity for {pid}: {data.get('quantity')!r}")
        pid = str(pid).strip()
        return cls(
            product_id=pid,
            name=str(data.get("name") or pid),
            unit_price=price,
            quantity=qty,
            names=_localized_names(data),
            original_price=_parse_price(data.get("original_price")),
            image=str(data.get("image") or ""),
        )

    def to_dict(self) -> dict:
        data = {"id": self.product_id, "name": self.name}
        for code, value in sorted(self.names.items()):
            data[f"name_{code}"] = value
        data.update({
            "price": str(self.unit_price),
            "original_price": str(self.original_price) if self.original_price is not None else None,
            "image": self.image,
            "quantity": self.quantity,
        })
        return data

    def display_name(self, language: str | None = None) -> str:
        if language:
            short = language.lower().split("-")[0]
            return self.names.get(short) or self.name
        return self.name

    @property
    def line_total(self) -> Decimal:
        return pricing.line_total(self)

    @property
    def has_discount(self) -> bool:
        return self.original_price is not None and self.original_price > self.unit_price


# ---------------------------------------------------------
# Cart
# ---------------------------------------------------------

class Cart:
    def __init__(self, storage, notify: Callable[[str, str], None] | None = None, key: str | None = None):
        self.storage = storage
        self.notify = notify
        self.key = key or getattr(settings, "SHOP_CART_SESSION_KEY", CART_KEY)
        self._items: dict[str, LineItem] = {}
        self._listeners: list[Callable[["Cart"], None]] = []
        self.load()

    # ---- persistence ----

    def load(self) -> "Cart":
        """Hydrate from storage, keeping only the entries that still make sense."""
        self._items = {}
        try:
            raw = self.storage.get(self.key)
        except Exception:
            logger.warning("Cart storage unreadable; starting empty", exc_info=True)
            return self
        if not raw:
            return self

        try:
            entries = _decode(raw)
        except PersistenceReadError as exc:
            logger.warning("Discarding cart payload: %s", exc)
            return self

        dropped = 0
        for entry in entries:
            try:
                item = LineItem.from_dict(entry)
            except (TypeError, ValueError) as exc:
                dropped += 1
                logger.debug("Dropping cart entry %r: %s", entry, exc)
                continue
            existing = self._items.get(item.product_id)
            if existing:
                existing.quantity += item.quantity
            else:
                self._items[item.product_id] = item
        if dropped:
            logger.warning("Dropped %d malformed cart entr%s on load", dropped, "y" if dropped == 1 else "ies")
        return self

    def save(self) -> bool:
        try:
            payload = json.dumps([it.to_dict() for it in self._items.values()], ensure_ascii=False)
            self.storage.set(self.key, payload)
        except Exception as exc:
            err = PersistenceWriteError(str(exc) or exc.__class__.__name__)
            logger.warning("Cart not persisted, keeping in-memory state: %s", err)
            return False
        return True

    # ---- change notification ----

    def subscribe(self, callback: Callable[["Cart"], None]):
        self._listeners.append(callback)
        return callback

    def unsubscribe(self, callback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self, message: str | None = None) -> None:
        self.save()
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.warning("Cart listener %r failed", listener, exc_info=True)
        send(self.notify, SUCCESS, message)

    # ---- mutations ----

    def add_item(self, product, quantity=1) -> bool:
        try:
            qty = _parse_int(quantity)
            if qty is None or qty < 1:
                raise InvalidProductError(f"quantity must be a positive integer, got {quantity!r}")
            item = LineItem.from_product(product, qty)
        except InvalidProductError as exc:
            logger.warning("Rejected add to cart: %s", exc)
            send(self.notify, ERROR, _("Could not add this item to the cart."))
            return False

        existing = self._items.get(item.product_id)
        if existing:
            existing.quantity += qty
        else:
            self._items[item.product_id] = item
        self._changed(_("Item added to cart"))
        return True

    def remove_item(self, product_id) -> bool:
        pid = str(product_id)
        if pid not in self._items:
            logger.info("%s", ItemNotFoundError(pid))
            return False
        del self._items[pid]
        self._changed(_("Item removed from cart"))
        return True

    def set_quantity(self, product_id, quantity) -> bool:
        pid = str(product_id)
        if pid not in self._items:
            logger.info("%s", ItemNotFoundError(pid))
            return False
        qty = _parse_int(quantity)
        if qty is None:
            logger.warning("Ignoring quantity %r for %s", quantity, pid)
            return False
        if qty <= 0:
            return self.remove_item(pid)
        self._items[pid].quantity = qty
        self._changed(_("Cart updated"))
        return True

    def increase(self, product_id) -> bool:
        item = self.get_item(product_id)
        if item is None:
            logger.info("%s", ItemNotFoundError(product_id))
            return False
        return self.set_quantity(item.product_id, item.quantity + 1)

    def decrease(self, product_id) -> bool:
        item = self.get_item(product_id)
        if item is None:
            logger.info("%s", ItemNotFoundError(product_id))
            return False
        return self.set_quantity(item.product_id, item.quantity - 1)

    def clear(self) -> None:
        self._items = {}
        self._changed()

    # ---- reads ----

    @property
    def items(self) -> list[LineItem]:
        return list(self._items.values())

    def get_item(self, product_id) -> LineItem | None:
        return self._items.get(str(product_id))

    def has_item(self, product_id) -> bool:
        return str(product_id) in self._items

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.items)

    def subtotal(self) -> Decimal:
        return pricing.subtotal(self._items.values())

    def item_count(self) -> int:
        return pricing.item_count(self._items.values())

    def unique_item_count(self) -> int:
        return pricing.unique_item_count(self._items.values())


def _decode(raw) -> list:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise PersistenceReadError(f"invalid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise PersistenceReadError(f"expected a list, got {type(raw).__name__}")
    return raw


def for_request(request, notify: bool = True) -> Cart:
    """Cart bound to the visitor's session, reporting through django messages."""
    return Cart(
        SessionStorage(request.session),
        notify=MessagesNotifier(request) if notify else None,
    )
