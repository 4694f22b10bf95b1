import cloudinary.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Name (English)")),
                ("name_si", models.CharField(blank=True, max_length=255, verbose_name="Name (Sinhala)")),
                ("name_ta", models.CharField(blank=True, max_length=255, verbose_name="Name (Tamil)")),
                ("slug", models.SlugField(blank=True, max_length=160, unique=True)),
            ],
            options={
                "verbose_name": "Category",
                "verbose_name_plural": "Categories",
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="DeliveryCharge",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("district", models.CharField(db_index=True, max_length=100, verbose_name="District")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="City")),
                ("charge", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Charge")),
            ],
            options={
                "verbose_name": "Delivery Charge",
                "verbose_name_plural": "Delivery Charges",
                "ordering": ("district", "city"),
                "unique_together": {("district", "city")},
            },
        ),
        migrations.CreateModel(
            name="PaymentMethod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Name (English)")),
                ("name_si", models.CharField(blank=True, max_length=100, verbose_name="Name (Sinhala)")),
                ("name_ta", models.CharField(blank=True, max_length=100, verbose_name="Name (Tamil)")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="Sort order")),
            ],
            options={
                "verbose_name": "Payment Method",
                "verbose_name_plural": "Payment Methods",
                "ordering": ("sort_order", "id"),
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Name (English)")),
                ("name_si", models.CharField(blank=True, max_length=255, verbose_name="Name (Sinhala)")),
                ("name_ta", models.CharField(blank=True, max_length=255, verbose_name="Name (Tamil)")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Price")),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Original Price")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("is_featured", models.BooleanField(default=False, verbose_name="Featured")),
                ("image", cloudinary.models.CloudinaryField(blank=True, max_length=255, null=True, verbose_name="image")),
                ("slug", models.SlugField(blank=True, max_length=160, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="products", to="shop.category")),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ("-created_at", "-id"),
            },
        ),
    ]
