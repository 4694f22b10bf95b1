import logging
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _
from django.utils.text import slugify
from django.dispatch import receiver
from django.db.models.signals import post_delete

from cloudinary import uploader
from cloudinary.models import CloudinaryField

logger = logging.getLogger(__name__)


# -------------------------
# Slug helper
# -------------------------
def unique_slug_for(model, base: str, *, pk=None, field_name: str = "slug", max_length: int | None = None) -> str:
    if max_length is None:
        max_length = model._meta.get_field(field_name).max_length or 255

    base_slug = slugify(base or "") or "item"
    base_slug = base_slug[:max_length]

    qs = model.objects.all()
    if pk:
        qs = qs.exclude(pk=pk)

    slug = base_slug
    if not qs.filter(**{field_name: slug}).exists():
        return slug

    # Deduplicate with -2, -3, ... while keeping length <= max_length
    i = 2
    while True:
        suffix = f"-{i}"
        allowed = max_length - len(suffix)
        slug = (base_slug[:allowed] if len(base_slug) > allowed else base_slug) + suffix
        if not qs.filter(**{field_name: slug}).exists():
            return slug
        i += 1


class LocalizedNameMixin:
    """name / name_si / name_ta with fallback to the English name."""

    def display_name(self, lang: str | None = None) -> str:
        short = (lang or "").lower().split("-")[0]
        if short and short != "en":
            localized = getattr(self, f"name_{short}", None)
            if localized:
                return localized
        return self.name


# -------------------------
# Models
# -------------------------
class Category(LocalizedNameMixin, models.Model):
    name = models.CharField(max_length=255, verbose_name=_("Name (English)"))
    name_si = models.CharField(max_length=255, blank=True, verbose_name=_("Name (Sinhala)"))
    name_ta = models.CharField(max_length=255, blank=True, verbose_name=_("Name (Tamil)"))
    slug = models.SlugField(max_length=160, unique=True, blank=True)

    class Meta:
        ordering = ("name",)
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")

    def __str__(self):
        return self.name or str(self.pk)

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = unique_slug_for(Category, self.name, pk=self.pk)
        super().save(*args, **kwargs)


class ActiveQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Product(LocalizedNameMixin, models.Model):
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="products"
    )
    name = models.CharField(max_length=255, verbose_name=_("Name (English)"))
    name_si = models.CharField(max_length=255, blank=True, verbose_name=_("Name (Sinhala)"))
    name_ta = models.CharField(max_length=255, blank=True, verbose_name=_("Name (Tamil)"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    price = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_("Price"))
    original_price = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True, verbose_name=_("Original Price")
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    is_featured = models.BooleanField(default=False, verbose_name=_("Featured"))
    image = CloudinaryField("image", folder="products", blank=True, null=True)
    slug = models.SlugField(max_length=160, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Product")
        verbose_name_plural = _("Products")

    def __str__(self):
        return self.name or str(self.pk)

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = unique_slug_for(Product, self.name, pk=self.pk)
        super().save(*args, **kwargs)

    @property
    def image_url(self) -> str:
        if not getattr(self, "image", None):
            return ""
        try:
            return self.image.url or ""
        except Exception:
            return ""

    @property
    def has_discount(self) -> bool:
        return self.original_price is not None and self.original_price > self.price


class DeliveryCharge(models.Model):
    """Per-district delivery fee; a row without city is the district default."""

    district = models.CharField(max_length=100, db_index=True, verbose_name=_("District"))
    city = models.CharField(max_length=100, blank=True, default="", verbose_name=_("City"))
    charge = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_("Charge"))

    class Meta:
        ordering = ("district", "city")
        unique_together = ("district", "city")
        verbose_name = _("Delivery Charge")
        verbose_name_plural = _("Delivery Charges")

    def __str__(self):
        return f"{self.district} / {self.city}" if self.city else self.district


def delivery_charge_for(district: str, city: str | None = None) -> Decimal:
    """City-specific charge, else the district default, else 0."""
    district = (district or "").strip()
    city = (city or "").strip()
    if not district:
        return Decimal("0")
    qs = DeliveryCharge.objects.filter(district__iexact=district)
    if city:
        row = qs.filter(city__iexact=city).first()
        if row:
            return row.charge
    row = qs.filter(city="").first()
    return row.charge if row else Decimal("0")


class PaymentMethod(LocalizedNameMixin, models.Model):
    name = models.CharField(max_length=100, verbose_name=_("Name (English)"))
    name_si = models.CharField(max_length=100, blank=True, verbose_name=_("Name (Sinhala)"))
    name_ta = models.CharField(max_length=100, blank=True, verbose_name=_("Name (Tamil)"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    sort_order = models.PositiveIntegerField(default=0, verbose_name=_("Sort order"))

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ("sort_order", "id")
        verbose_name = _("Payment Method")
        verbose_name_plural = _("Payment Methods")

    def __str__(self):
        return self.name


# -------------------------
# Signals
# -------------------------
@receiver(post_delete, sender=Product)
def auto_delete_cloudinary_image_on_delete(sender, instance, **kwargs):
    """Clean up Cloudinary asset when a product is deleted."""
    public_id = getattr(getattr(instance, "image", None), "public_id", None)
    if not public_id:
        return
    try:
        uploader.destroy(public_id)
    except Exception:
        logger.warning("Could not delete Cloudinary image %s", public_id, exc_info=True)
