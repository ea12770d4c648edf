from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class CallSession(models.Model):
    """One admin to kitchen voice/video call."""

    class Status(models.TextChoices):
        ONGOING = "ongoing", _("Ongoing")
        COMPLETED = "completed", _("Completed")
        MISSED = "missed", _("Missed")

    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="calls_started"
    )
    kitchen_staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="calls_received",
    )
    start_time = models.DateTimeField(default=timezone.now)
    end_time = models.DateTimeField(null=True, blank=True)
    duration = models.PositiveIntegerField(default=0, help_text="Call length in seconds.")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ONGOING)

    class Meta:
        ordering = ["-start_time"]
        verbose_name = _("Call Session")
        verbose_name_plural = _("Call Sessions")

    def __str__(self):
        return f"Call {self.pk} ({self.status})"
