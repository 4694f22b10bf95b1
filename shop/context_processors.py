import logging

from .cart import for_request

logger = logging.getLogger(__name__)


def cart(request):
    if not hasattr(request, "session"):
        return {"cart_count": 0, "cart_subtotal": 0}
    try:
        c = for_request(request, notify=False)
        count, subtotal = c.item_count(), c.subtotal()
    except Exception:
        logger.warning("Cart badge unavailable", exc_info=True)
        count, subtotal = 0, 0
    return {"cart_count": count, "cart_subtotal": subtotal}
