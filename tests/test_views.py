"""Tests for storefront pages, cart endpoints and checkout"""
import json
from decimal import Decimal

import pytest
from django.conf import settings
from django.urls import reverse

from shop.models import Category, DeliveryCharge, PaymentMethod, Product

pytestmark = pytest.mark.django_db

AJAX = {"HTTP_X_REQUESTED_WITH": "XMLHttpRequest"}


@pytest.fixture
def product():
    cat = Category.objects.create(name="Sarees")
    return Product.objects.create(category=cat, name="Silk Saree", name_si="සේද සාරිය", price=Decimal("2500"))


def session_cart(client):
    raw = client.session.get(settings.SHOP_CART_SESSION_KEY)
    return json.loads(raw) if raw else []


def add(client, product, qty=1, **extra):
    return client.post(reverse("shop:cart_add"), {"product_id": product.pk, "qty": qty}, **extra)


def test_index_lists_active_products(client, product):
    Product.objects.create(name="Retired Sarong", price=1, is_active=False)
    response = client.get(reverse("shop:home"))
    assert response.status_code == 200
    assert "Silk Saree" in response.content.decode()
    assert "Retired Sarong" not in response.content.decode()


def test_index_search_and_category(client, product):
    Product.objects.create(name="Cotton Sarong", price=1)
    body = client.get(reverse("shop:home"), {"q": "silk"}).content.decode()
    assert "Silk Saree" in body and "Cotton Sarong" not in body

    body = client.get(reverse("shop:home"), {"category": "sarees"}).content.decode()
    assert "Silk Saree" in body and "Cotton Sarong" not in body


def test_ajax_search_fragment(client, product):
    response = client.get(reverse("shop:ajax_search"), {"q": "saree"})
    assert response.status_code == 200
    assert "Silk Saree" in response.content.decode()


def test_product_detail(client, product):
    response = client.get(reverse("shop:product_detail", kwargs={"slug": product.slug}))
    assert response.status_code == 200
    assert "Silk Saree" in response.content.decode()
    response = client.get(reverse("shop:product_detail_by_id", kwargs={"pk": 9999}))
    assert response.status_code == 404


def test_add_to_cart_redirects_and_persists(client, product):
    response = add(client, product, 2)
    assert response.status_code == 302
    assert response.url == reverse("shop:cart")
    assert session_cart(client) == [{
        "id": str(product.pk),
        "name": "Silk Saree",
        "name_si": "සේද සාරිය",
        "price": "2500.00",
        "original_price": None,
        "image": "",
        "quantity": 2,
    }]

    page = client.get(reverse("shop:cart"))
    body = page.content.decode()
    assert "Silk Saree" in body
    assert "Rs. 5,000" in body
    assert page.context["cart_count"] == 2


def test_add_to_cart_ajax(client, product):
    add(client, product, 1, **AJAX)
    data = add(client, product, 2, **AJAX).json()
    assert data["ok"] is True
    assert data["count"] == 3
    assert data["unique_count"] == 1
    assert data["subtotal"] == "7500.00"
    assert data["subtotal_display"] == "Rs. 7,500"
    assert data["msg"] == "Item added to cart"


def test_add_unknown_product(client):
    response = client.post(reverse("shop:cart_add"), {"product_id": "9999"})
    assert response.status_code == 400
    response = client.post(reverse("shop:cart_add"), {"product_id": "abc"})
    assert response.status_code == 400


def test_add_bad_quantity_ajax(client, product):
    response = add(client, product, "0", **AJAX)
    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert session_cart(client) == []


def test_update_quantity(client, product):
    add(client, product, 1)
    data = client.post(reverse("shop:cart_update"), {"product_id": product.pk, "qty": 4}, **AJAX).json()
    assert data["count"] == 4
    assert data["line"]["line_total_display"] == "Rs. 10,000"

    data = client.post(reverse("shop:cart_update"), {"product_id": product.pk, "action": "decrease"}, **AJAX).json()
    assert data["line"]["quantity"] == 3

    data = client.post(reverse("shop:cart_update"), {"product_id": product.pk, "qty": 0}, **AJAX).json()
    assert data["line"] == {"removed": True}
    assert data["count"] == 0
    assert session_cart(client) == []


def test_update_missing_item(client):
    response = client.post(reverse("shop:cart_update"), {"product_id": "42", "qty": 2}, **AJAX)
    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_remove_and_clear(client, product):
    add(client, product, 2)
    data = client.post(reverse("shop:cart_remove"), {"product_id": product.pk}, **AJAX).json()
    assert data["ok"] is True and data["count"] == 0

    add(client, product, 2)
    response = client.post(reverse("shop:cart_clear"))
    assert response.status_code == 302
    assert session_cart(client) == []


def test_cart_endpoints_require_post(client):
    assert client.get(reverse("shop:cart_add")).status_code == 405


def test_corrupt_session_cart_does_not_break_pages(client, product):
    session = client.session
    session[settings.SHOP_CART_SESSION_KEY] = "{broken"
    session.save()
    response = client.get(reverse("shop:cart"))
    assert response.status_code == 200
    assert response.context["cart_count"] == 0


def test_checkout_page(client, product):
    PaymentMethod.objects.create(name="Bank Transfer")
    add(client, product, 1)
    response = client.get(reverse("shop:checkout"))
    assert response.status_code == 200
    assert "Bank Transfer" in response.content.decode()


def test_checkout_empty_cart(client):
    response = client.post(reverse("shop:checkout"), {"phone": "0771234567", "district": "Colombo"})
    assert response.status_code == 400
    assert "Your cart is empty" in response.content.decode()


def test_checkout_missing_phone(client, product):
    add(client, product, 1)
    response = client.post(reverse("shop:checkout"), {"phone": "", "district": "Colombo"})
    assert response.status_code == 400
    assert "Please enter your phone number and district." in response.content.decode()

    response = client.post(reverse("shop:checkout"), {"district": "Colombo"}, **AJAX)
    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_checkout_redirects_to_whatsapp(client, product):
    DeliveryCharge.objects.create(district="Colombo", charge=Decimal("350"))
    method = PaymentMethod.objects.create(name="Koko Pay")
    add(client, product, 2)

    response = client.post(reverse("shop:checkout"), {
        "phone": "0771234567",
        "district": "Colombo",
        "city": "Dehiwala",
        "payment_method": method.pk,
    })

    assert response.status_code == 302
    assert response.url.startswith(f"https://wa.me/{settings.SHOP_WHATSAPP_NUMBER}?text=")
    assert "Total%3A*%20Rs.%205%2C350" in response.url
    assert "Koko%20Pay" in response.url
    # kept so the customer can retry
    assert session_cart(client)[0]["quantity"] == 2


def test_checkout_ajax_returns_url(client, product):
    add(client, product, 1)
    data = client.post(reverse("shop:checkout"), {"phone": "077", "district": "Kandy"}, **AJAX).json()
    assert data["ok"] is True
    assert data["url"].startswith("https://wa.me/")


def test_delivery_charge_endpoint(client, product):
    DeliveryCharge.objects.create(district="Colombo", charge=Decimal("350"))
    add(client, product, 1)
    data = client.get(reverse("shop:delivery_charge"), {"district": "Colombo"}).json()
    assert data["charge"] == "350.00"
    assert data["total_display"] == "Rs. 2,850"


def test_home_highlights_featured_and_new_arrivals(client, product):
    star = Product.objects.create(name="Handloom Sarong", price=Decimal("1800"), is_featured=True)
    Product.objects.create(name="Hidden Star", price=1, is_featured=True, is_active=False)

    response = client.get(reverse("shop:home"))
    assert [p.pk for p in response.context["featured"]] == [star.pk]
    assert [p.pk for p in response.context["new_arrivals"]] == [star.pk, product.pk]
    body = response.content.decode()
    assert "Featured Products" in body and "New Arrivals" in body
    assert "Hidden Star" not in body


def test_new_arrivals_are_capped(client):
    for n in range(10):
        Product.objects.create(name=f"Sarong {n}", price=1)
    response = client.get(reverse("shop:home"))
    assert len(response.context["new_arrivals"]) == 8
    assert response.context["new_arrivals"][0].name == "Sarong 9"


def test_search_hides_highlights(client, product):
    Product.objects.create(name="Cotton Sarong", price=1, is_featured=True)
    response = client.get(reverse("shop:home"), {"q": "silk"})
    assert response.context["featured"] == []
    assert response.context["new_arrivals"] == []


def test_checkout_error_is_shown_once(client, product):
    add(client, product, 1)
    response = client.post(reverse("shop:checkout"), {"district": "Colombo"})
    assert response.status_code == 400
    assert response.content.decode().count("Please enter your phone number and district.") == 1


def test_checkout_page_offers_delivery_lookup(client, product):
    add(client, product, 1)
    body = client.get(reverse("shop:checkout")).content.decode()
    assert f'data-delivery-url="{reverse("shop:delivery_charge")}"' in body
    assert "calculated from your district" in body
    assert "Rs. 2,500" in body


def test_refused_checkout_shows_delivery_and_total(client, product):
    DeliveryCharge.objects.create(district="Colombo", charge=Decimal("350"))
    add(client, product, 1)
    body = client.post(reverse("shop:checkout"), {"district": "Colombo"}).content.decode()
    assert "Rs. 350" in body
    assert "Rs. 2,850" in body
