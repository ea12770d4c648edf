from django.contrib import admin

from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "category", "priority", "updated_at")
    list_filter = ("category", "priority")
    search_fields = ("name",)
