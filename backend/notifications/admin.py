from django.contrib import admin

from .models import CallSession


@admin.register(CallSession)
class CallSessionAdmin(admin.ModelAdmin):
    list_display = ("id", "admin", "kitchen_staff", "status", "start_time", "duration")
    list_filter = ("status",)
    readonly_fields = ("start_time", "end_time", "duration")
