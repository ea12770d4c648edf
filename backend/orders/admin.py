from django.contrib import admin

from .models import Order, OrderLine, OrderUpdateHistory


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    readonly_fields = ("menu_item_id", "name", "unit_price", "category", "quantity", "get_line_total")
    fields = readonly_fields
    can_delete = False

    def get_line_total(self, obj):
        return f"${obj.line_total:,.2f}"

    get_line_total.short_description = "Line Total"

    def has_add_permission(self, request, obj=None):
        return False


class OrderUpdateHistoryInline(admin.TabularInline):
    model = OrderUpdateHistory
    extra = 0
    readonly_fields = ("updated_at", "updated_by", "changes")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are changed through the API so revenue and notifications stay in
    step; the admin is read-only.
    """

    list_display = ("id", "status", "table_display_text", "total_price", "created_by", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("id", "table_key", "created_by")
    inlines = [OrderLineInline, OrderUpdateHistoryInline]
    readonly_fields = [field.name for field in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
