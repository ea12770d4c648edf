from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.action(description="Approve selected kitchen staff")
def approve_kitchen_staff(modeladmin, request, queryset):
    updated = queryset.update(role=User.Role.KITCHEN, is_approved=True)
    modeladmin.message_user(request, f"Approved {updated} user(s).")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("email",)
    list_display = ("email", "name", "role", "is_approved", "is_active")
    list_filter = ("role", "is_approved", "is_active")
    search_fields = ("email", "name")
    actions = [approve_kitchen_staff]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "role", "is_approved")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "name", "role", "password1", "password2")}),
    )
