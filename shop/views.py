# shop/views.py
from __future__ import annotations

import logging
import re

from django.db.models import Q
from django.http import JsonResponse, HttpResponseBadRequest, HttpResponseRedirect
from django.shortcuts import render, get_object_or_404, redirect
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST, require_http_methods
from django.utils.translation import get_language, gettext as _

from .cart import Cart, SessionStorage, for_request
from .checkout import CheckoutDispatcher
from .exceptions import CheckoutError
from .forms import CheckoutForm
from .models import Category, Product, delivery_charge_for
from .pricing import format_money, order_total

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# Language & request helpers
# ---------------------------------------------------------

def _short_lang(default: str = "en") -> str:
    """Return 'en' / 'si' / 'ta', short code without region."""
    return (get_language() or default).lower().split("-")[0]


def _is_ajax(request) -> bool:
    return request.headers.get("x-requested-with") == "XMLHttpRequest"


def _cart_for(request) -> tuple[Cart, list[dict]]:
    """
    AJAX calls collect notifications into the JSON body; normal posts
    go through django messages.
    """
    notes: list[dict] = []
    if _is_ajax(request):
        def notify(kind, message):
            notes.append({"kind": kind, "message": message})
        return Cart(SessionStorage(request.session), notify=notify), notes
    return for_request(request), notes


def _cart_json(cart: Cart, notes: list[dict], ok: bool = True, **extra) -> JsonResponse:
    subtotal = cart.subtotal()
    payload = {
        "ok": ok,
        "count": cart.item_count(),
        "unique_count": cart.unique_item_count(),
        "subtotal": f"{subtotal:.2f}",
        "subtotal_display": format_money(subtotal),
        "msg": notes[-1]["message"] if notes else "",
        "cart_url": reverse("shop:cart"),
    }
    payload.update(extra)
    return JsonResponse(payload, status=200 if ok else 400)


def _line_json(cart: Cart, product_id) -> dict:
    item = cart.get_item(product_id)
    if item is None:
        return {"removed": True}
    return {
        "removed": False,
        "quantity": item.quantity,
        "unit_price_display": format_money(item.unit_price),
        "line_total": f"{item.line_total:.2f}",
        "line_total_display": format_money(item.line_total),
    }


# ---------------------------------------------------------
# Product fetching / search / grouping
# ---------------------------------------------------------

SEARCH_FIELDS = (
    "name__icontains",
    "name_si__icontains",
    "name_ta__icontains",
    "description__icontains",
    "category__name__icontains",
)


def _search(qs, q: str):
    """Every word must match at least one of the name/description fields."""
    terms = [t for t in re.split(r"\s+", (q or "").strip()) if t]
    for term in terms:
        term_q = Q()
        for f in SEARCH_FIELDS:
            term_q |= Q(**{f: term})
        qs = qs.filter(term_q)
    return qs.distinct() if terms else qs


def _build_sections(q: str = "", category_slug: str = ""):
    ui_short = _short_lang()
    qs = Product.objects.active().select_related("category")
    if category_slug:
        qs = qs.filter(category__slug=category_slug)
    qs = _search(qs, q)

    grouped = {}
    for p in qs:
        p.display_title = p.display_name(ui_short)
        cat = p.category
        anchor = f"cat-{cat.pk}" if cat else "cat-misc"
        label = cat.display_name(ui_short) if cat else _("Other")
        bucket = grouped.setdefault(anchor, {"anchor": anchor, "label": label, "products": []})
        bucket["products"].append(p)

    return sorted(grouped.values(), key=lambda s: s["label"].lower())


# =========================================================
# CART
# =========================================================

def cart_detail(request):
    ui_short = _short_lang()
    cart = for_request(request, notify=False)
    lines = [
        {
            "item": item,
            "title": item.display_name(ui_short),
            "unit_price_display": format_money(item.unit_price),
            "line_total_display": format_money(item.line_total),
        }
        for item in cart.items
    ]
    return render(
        request,
        "shop/cart.html",
        {
            "lines": lines,
            "subtotal": cart.subtotal(),
            "subtotal_display": format_money(cart.subtotal()),
        },
    )


@require_POST
def cart_add_view(request):
    pid = request.POST.get("product_id")
    qty = request.POST.get("qty") or "1"
    try:
        product = Product.objects.active().get(pk=int(pid))
    except (TypeError, ValueError, Product.DoesNotExist):
        return HttpResponseBadRequest(_("Invalid product or quantity."))

    cart, notes = _cart_for(request)
    ok = cart.add_item(product, qty)

    if _is_ajax(request):
        return _cart_json(cart, notes, ok=ok)
    if not ok:
        return HttpResponseBadRequest(_("Invalid product or quantity."))
    return redirect("shop:cart")


@require_POST
def cart_update_qty_view(request):
    """Set an explicit qty, or step it with action=increase|decrease."""
    pid = request.POST.get("product_id")
    action = request.POST.get("action")
    if not pid:
        return HttpResponseBadRequest(_("Invalid update."))

    cart, notes = _cart_for(request)
    if action == "increase":
        ok = cart.increase(pid)
    elif action == "decrease":
        ok = cart.decrease(pid)
    else:
        ok = cart.set_quantity(pid, request.POST.get("qty"))

    if _is_ajax(request):
        return _cart_json(cart, notes, ok=ok, line=_line_json(cart, pid))
    if not ok:
        return HttpResponseBadRequest(_("Invalid update."))
    return redirect("shop:cart")


@require_POST
def cart_remove_view(request):
    cart, notes = _cart_for(request)
    ok = cart.remove_item(request.POST.get("product_id", ""))

    if _is_ajax(request):
        return _cart_json(cart, notes, ok=ok)
    return redirect("shop:cart")


@require_POST
def cart_clear_view(request):
    cart, notes = _cart_for(request)
    cart.clear()
    if _is_ajax(request):
        return _cart_json(cart, notes)
    return redirect("shop:cart")


# =========================================================
# CHECKOUT
# =========================================================

@require_http_methods(["GET", "POST"])
def checkout_view(request):
    """
    GET shows the customer form; POST hands the order to WhatsApp.

    The cart is kept after a successful dispatch so the customer can try
    again if WhatsApp does not open.
    """
    ui_short = _short_lang()
    ajax = _is_ajax(request)
    cart, notes = _cart_for(request)

    if request.method == "GET":
        form = CheckoutForm(language=ui_short)
        return _render_checkout(request, cart, form)

    form = CheckoutForm(request.POST, language=ui_short)
    if not form.is_valid():
        if ajax:
            return JsonResponse({"ok": False, "errors": form.errors}, status=400)
        return _render_checkout(request, cart, form, status=400)

    info = form.customer_info()
    delivery = delivery_charge_for(info.district, info.city)
    dispatcher = CheckoutDispatcher(cart)
    try:
        url = dispatcher.dispatch(delivery, info, language=ui_short)
    except CheckoutError as exc:
        # the dispatcher already reported it through the cart's notifier
        logger.info("Checkout refused: %s", exc)
        if ajax:
            return JsonResponse({"ok": False, "error": notes[-1]["message"] if notes else str(exc)}, status=400)
        return _render_checkout(request, cart, form, status=400, delivery=delivery)

    if ajax:
        return JsonResponse({"ok": True, "url": url})
    return HttpResponseRedirect(url)


def _render_checkout(request, cart: Cart, form: CheckoutForm, status: int = 200, delivery=None):
    ui_short = _short_lang()
    items = cart.items
    return render(
        request,
        "shop/checkout.html",
        {
            "form": form,
            "lines": [(item.display_name(ui_short), item) for item in items],
            "subtotal_display": format_money(cart.subtotal()),
            "delivery_display": format_money(delivery) if delivery is not None else "",
            "total_display": format_money(order_total(items, delivery)) if delivery is not None else "",
            "is_empty": cart.is_empty(),
        },
        status=status,
    )


@require_GET
def delivery_charge_view(request):
    """Charge and order total for the district/city typed on the checkout page."""
    district = (request.GET.get("district") or "").strip()
    city = (request.GET.get("city") or "").strip()
    charge = delivery_charge_for(district, city)
    total = order_total(for_request(request, notify=False).items, charge)
    return JsonResponse(
        {
            "district": district,
            "city": city,
            "charge": f"{charge:.2f}",
            "charge_display": format_money(charge),
            "total": f"{total:.2f}",
            "total_display": format_money(total),
        }
    )


# =========================================================
# PAGES
# =========================================================

NEW_ARRIVALS_LIMIT = 8


def _highlights():
    """Featured products and the newest arrivals for the unfiltered home page."""
    ui_short = _short_lang()
    active = Product.objects.active().select_related("category")
    featured = list(active.filter(is_featured=True))
    new_arrivals = list(active.order_by("-created_at", "-id")[:NEW_ARRIVALS_LIMIT])
    for p in featured + new_arrivals:
        p.display_title = p.display_name(ui_short)
    return featured, new_arrivals


@require_GET
def index(request):
    """Home page: highlights, then the category-ordered grid with optional search (?q=...)."""
    q = (request.GET.get("q") or "").strip()
    category = (request.GET.get("category") or "").strip()
    sections = _build_sections(q, category)
    featured, new_arrivals = ([], []) if (q or category) else _highlights()
    return render(
        request,
        "shop/index.html",
        {
            "sections": sections,
            "featured": featured,
            "new_arrivals": new_arrivals,
            "categories": Category.objects.all(),
            "q": q,
            "category": category,
            "is_search": bool(q),
        },
    )


@require_GET
def ajax_search(request):
    """Returns only the sections fragment so the page can update in place."""
    q = (request.GET.get("q") or "").strip()
    sections = _build_sections(q, (request.GET.get("category") or "").strip())
    return render(
        request,
        "shop/partials/sections.html",
        {"sections": sections, "q": q, "is_search": bool(q)},
    )


def product_detail(request, slug=None, pk=None):
    ui_short = _short_lang()
    lookup = {"slug": slug} if slug else {"pk": pk}
    product = get_object_or_404(Product.objects.active().select_related("category"), **lookup)
    product.display_title = product.display_name(ui_short)
    return render(request, "shop/product_detail.html", {"product": product})
