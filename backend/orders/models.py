import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orders.services.tables import format_table_display, normalize_table_numbers, table_key


class Order(models.Model):
    """
    A kitchen ticket and its bill.

    Lines are stored as `OrderLine` snapshots; the total is always recomputed
    from them when they change. The `added_items`/`removed_items`/`updated_items`
    fields hold the latest unacknowledged diff for the kitchen display.
    """

    class Status(models.TextChoices):
        PREPARING = "preparing", _("Preparing")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PREPARING, db_index=True
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    table_numbers = models.JSONField(default=list, blank=True)
    table_key = models.CharField(
        max_length=255,
        blank=True,
        default="",
        editable=False,
        db_index=True,
        help_text="Comma delimited copy of table_numbers used for table lookups.",
    )

    created_by = models.CharField(max_length=150, default="admin")
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_updated_at = models.DateTimeField(null=True, blank=True)

    completed_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.CharField(max_length=150, blank=True, default="")
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.CharField(max_length=150, blank=True, default="")
    cancellation_reason = models.TextField(blank=True, default="")

    added_items = models.JSONField(default=list, blank=True)
    removed_items = models.JSONField(default=list, blank=True)
    updated_items = models.JSONField(default=list, blank=True)

    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Completed orders are purged once this moment has passed.",
    )
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "-created_at"], name="order_status_created_idx"),
            models.Index(fields=["status", "expires_at"], name="order_status_expires_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.get_status_display()}, {self.table_display_text})"

    def save(self, *args, **kwargs):
        self.table_numbers = normalize_table_numbers(self.table_numbers)
        self.table_key = table_key(self.table_numbers)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "table_numbers" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"table_key"}
        super().save(*args, **kwargs)

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.Status.COMPLETED, self.Status.CANCELLED)

    @property
    def table_display_text(self) -> str:
        return format_table_display(self.table_numbers)

    @property
    def has_pending_changes(self) -> bool:
        return bool(self.added_items or self.removed_items or self.updated_items)

    def clear_change_tracking(self):
        self.added_items = []
        self.removed_items = []
        self.updated_items = []
        self.last_updated_at = None

    def recomputed_total(self) -> Decimal:
        return sum((line.line_total for line in self.lines.all()), Decimal("0.00"))


class OrderLine(models.Model):
    """
    A menu item as it was priced into an order.

    `menu_item_id` is a plain copy of the catalog id, not a foreign key, so
    editing or deleting the menu never changes an existing order.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    position = models.PositiveIntegerField(default=0)
    menu_item_id = models.CharField(max_length=64)
    name = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    category = models.CharField(max_length=100, default="uncategorized")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["position", "id"]
        verbose_name = _("Order Line")
        verbose_name_plural = _("Order Lines")
        constraints = [
            models.UniqueConstraint(fields=["order", "menu_item_id"], name="orderline_unique_item"),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderUpdateHistory(models.Model):
    """Append-only record of the line changes made by each update."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="update_history")
    updated_at = models.DateTimeField(default=timezone.now)
    updated_by = models.CharField(max_length=150)
    changes = models.JSONField(default=dict)

    class Meta:
        ordering = ["updated_at", "id"]
        verbose_name = _("Order Update")
        verbose_name_plural = _("Order Update History")

    def __str__(self):
        return f"Update of {self.order_id} by {self.updated_by} at {self.updated_at}"
