from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class RevenueDay(models.Model):
    """Completed-order revenue for one business date. Only ever incremented."""

    date = models.DateField(unique=True)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    order_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        verbose_name = _("Daily Revenue")
        verbose_name_plural = _("Daily Revenue")

    def __str__(self):
        return f"{self.date}: {self.amount} ({self.order_count} orders)"


class RevenueByCategoryDay(models.Model):
    """Completed-order revenue for one (business date, category) pair."""

    date = models.DateField()
    category = models.CharField(max_length=100)
    display_name = models.CharField(max_length=100, blank=True, default="")
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_quantity = models.PositiveIntegerField(default=0)
    order_count = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "category"]
        verbose_name = _("Category Revenue")
        verbose_name_plural = _("Category Revenue")
        constraints = [
            models.UniqueConstraint(fields=["date", "category"], name="revenue_category_day_unique"),
        ]
        indexes = [
            models.Index(fields=["category", "date"], name="revenue_category_date_idx"),
        ]

    def __str__(self):
        return f"{self.date} {self.display_name or self.category}: {self.total_revenue}"
