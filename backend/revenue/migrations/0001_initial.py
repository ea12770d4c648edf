from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RevenueDay",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(unique=True)),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("order_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Daily Revenue",
                "verbose_name_plural": "Daily Revenue",
                "ordering": ["-date"],
            },
        ),
        migrations.CreateModel(
            name="RevenueByCategoryDay",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("category", models.CharField(max_length=100)),
                ("display_name", models.CharField(blank=True, default="", max_length=100)),
                ("total_revenue", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_quantity", models.PositiveIntegerField(default=0)),
                ("order_count", models.PositiveIntegerField(default=0)),
                ("expires_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Category Revenue",
                "verbose_name_plural": "Category Revenue",
                "ordering": ["-date", "category"],
                "constraints": [
                    models.UniqueConstraint(fields=("date", "category"), name="revenue_category_day_unique"),
                ],
                "indexes": [
                    models.Index(fields=["category", "date"], name="revenue_category_date_idx"),
                ],
            },
        ),
    ]
