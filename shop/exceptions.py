# shop/exceptions.py


class ShopError(Exception):
    """Base class for storefront errors."""


# -------------------------
# Cart
# -------------------------
class CartError(ShopError):
    pass


class InvalidProductError(CartError):
    """Product has no stable identifier (or an unusable quantity)."""


class ItemNotFoundError(CartError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Item not in cart: {product_id}")


class PersistenceWriteError(CartError):
    """Writing the cart snapshot to storage failed."""


class PersistenceReadError(CartError):
    """Persisted cart payload could not be decoded."""


# -------------------------
# Checkout
# -------------------------
class CheckoutError(ShopError):
    pass


class EmptyCartError(CheckoutError):
    pass


class IncompleteCustomerInfoError(CheckoutError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing customer details: " + ", ".join(missing))
