"""Tests for catalog, delivery and payment models"""
from decimal import Decimal

import pytest

from shop.cart import Cart, MemoryStorage
from shop.models import Category, DeliveryCharge, PaymentMethod, Product, delivery_charge_for

pytestmark = pytest.mark.django_db


def test_slugs_are_unique():
    a = Product.objects.create(name="Cotton Saree", price=Decimal("2500"))
    b = Product.objects.create(name="Cotton Saree", price=Decimal("2600"))
    assert a.slug == "cotton-saree"
    assert b.slug == "cotton-saree-2"


def test_category_slug_and_names():
    cat = Category.objects.create(name="Sarees", name_si="සාරි")
    assert cat.slug == "sarees"
    assert cat.display_name("si") == "සාරි"
    assert cat.display_name("ta") == "Sarees"
    assert cat.display_name() == "Sarees"


def test_active_products():
    Product.objects.create(name="Shown", price=1)
    Product.objects.create(name="Hidden", price=1, is_active=False)
    assert [p.name for p in Product.objects.active()] == ["Shown"]


def test_product_without_image():
    p = Product.objects.create(name="Plain", price=1)
    assert p.image_url == ""


def test_product_discount_flag():
    assert Product(name="x", price=Decimal("90"), original_price=Decimal("100")).has_discount
    assert not Product(name="x", price=Decimal("90")).has_discount


def test_product_goes_into_cart_as_snapshot():
    p = Product.objects.create(name="Batik Shirt", name_ta="பாடிக் சட்டை", price=Decimal("1800.00"),
                               original_price=Decimal("2000.00"))
    cart = Cart(MemoryStorage())
    assert cart.add_item(p, 2)

    item = cart.get_item(p.pk)
    assert item.product_id == str(p.pk)
    assert item.unit_price == Decimal("1800.00")
    assert item.original_price == Decimal("2000.00")
    assert item.display_name("ta") == "பாடிக் சட்டை"
    assert "si" not in item.names

    Product.objects.filter(pk=p.pk).update(price=Decimal("1"))
    assert Cart(cart.storage).subtotal() == Decimal("3600")


@pytest.fixture
def charges():
    DeliveryCharge.objects.create(district="Colombo", charge=Decimal("350"))
    DeliveryCharge.objects.create(district="Colombo", city="Dehiwala", charge=Decimal("300"))
    DeliveryCharge.objects.create(district="Jaffna", charge=Decimal("600"))


@pytest.mark.parametrize("district,city,expected", [
    ("Colombo", "Dehiwala", Decimal("300")),
    ("Colombo", "", Decimal("350")),
    ("colombo", "Moratuwa", Decimal("350")),
    ("Jaffna", None, Decimal("600")),
    ("Galle", "", Decimal("0")),
    ("", "", Decimal("0")),
])
def test_delivery_charge_lookup(charges, district, city, expected):
    assert delivery_charge_for(district, city) == expected


def test_payment_methods_ordering():
    PaymentMethod.objects.create(name="Card Payment", sort_order=2)
    PaymentMethod.objects.create(name="Bank Transfer", name_si="බැංකු මාරු", sort_order=1)
    PaymentMethod.objects.create(name="Old", sort_order=0, is_active=False)
    methods = list(PaymentMethod.objects.active())
    assert [m.name for m in methods] == ["Bank Transfer", "Card Payment"]
    assert methods[0].display_name("si") == "බැංකු මාරු"
