from django.contrib import admin

from .models import RevenueByCategoryDay, RevenueDay


@admin.register(RevenueDay)
class RevenueDayAdmin(admin.ModelAdmin):
    list_display = ("date", "amount", "order_count", "updated_at")
    date_hierarchy = "date"
    readonly_fields = ("date", "amount", "order_count", "created_at", "updated_at")


@admin.register(RevenueByCategoryDay)
class RevenueByCategoryDayAdmin(admin.ModelAdmin):
    list_display = ("date", "display_name", "total_revenue", "total_quantity", "order_count")
    list_filter = ("category",)
    date_hierarchy = "date"
    readonly_fields = (
        "date",
        "category",
        "display_name",
        "total_revenue",
        "total_quantity",
        "order_count",
        "expires_at",
        "created_at",
        "updated_at",
    )
