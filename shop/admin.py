from django import forms
from django.contrib import admin
from django.db.models import Count
from django.utils.html import format_html
from django_summernote.admin import SummernoteModelAdmin

from .models import Category, DeliveryCharge, PaymentMethod, Product
from .pricing import format_money


# --- Inlines ---
class ProductInline(admin.TabularInline):
    model = Product
    extra = 0
    fields = ("name", "price", "original_price", "is_active")
    show_change_link = True


# --- Product Admin ---
@admin.register(Product)
class ProductAdmin(SummernoteModelAdmin):
    list_display = (
        "name",
        "name_si",
        "name_ta",
        "category",
        "price_display",
        "original_price",
        "is_active",
        "is_featured",
        "thumb",
    )
    list_filter = ("category", "is_active", "is_featured")
    list_editable = ("is_active", "is_featured")
    search_fields = ("name", "name_si", "name_ta", "description", "category__name")
    list_select_related = ("category",)
    autocomplete_fields = ("category",)
    readonly_fields = ("slug", "created_at", "updated_at", "image_preview")
    summernote_fields = ("description",)
    fieldsets = (
        (None, {"fields": ("category", "slug")}),
        ("Names", {"fields": ("name", "name_si", "name_ta", "description")}),
        ("Pricing", {"fields": ("price", "original_price")}),
        ("Visibility", {"fields": ("is_active", "is_featured")}),
        ("Media", {"fields": ("image", "image_preview")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    @admin.display(description="Price", ordering="price")
    def price_display(self, obj):
        return format_money(obj.price)

    @admin.display(description="Image")
    def thumb(self, obj):
        url = obj.image_url
        if not url:
            return "-"
        return format_html(
            '<img src="{}" style="height:50px;border-radius:4px;object-fit:cover;" />',
            url,
        )

    @admin.display(description="Preview")
    def image_preview(self, obj):
        return self.thumb(obj)


# --- Category Admin ---
class CategoryAdminForm(forms.ModelForm):
    class Meta:
        model = Category
        fields = "__all__"

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Please provide an English name.")
        return name


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    form = CategoryAdminForm
    list_display = ("name", "name_si", "name_ta", "slug", "product_count")
    search_fields = ("name", "name_si", "name_ta")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [ProductInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(_product_count=Count("products"))

    @admin.display(description="Products", ordering="_product_count")
    def product_count(self, obj):
        return getattr(obj, "_product_count", None) or obj.products.count()


# --- Delivery & payment ---
@admin.register(DeliveryCharge)
class DeliveryChargeAdmin(admin.ModelAdmin):
    list_display = ("district", "city", "charge")
    list_editable = ("charge",)
    list_filter = ("district",)
    search_fields = ("district", "city")


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("name", "name_si", "name_ta", "is_active", "sort_order")
    list_editable = ("is_active", "sort_order")
    ordering = ("sort_order",)
